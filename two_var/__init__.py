"""two-var: var / let / const 宣言文とrequire()のスタイルチェッカー。"""

__version__ = "0.1.0"
