"""宣言子の分類モデル。"""

from enum import Enum


class DeclaratorClass(Enum):
    """宣言子の初期化式による分類。"""
    UNINITIALIZED = "uninitialized"  # 初期化式なし
    DYNAMIC_LOAD = "require"         # require()呼び出し（メンバーアクセス経由を含む）
    OTHER = "other"                  # その他の値


class LoadProvenance(Enum):
    """require()引数から推定したモジュールの出所。"""
    CORE = "core"          # Node.js組み込みモジュール
    FILE = "file"          # ./ ../ / で始まるパス
    MODULE = "module"      # その他の文字列リテラル
    COMPUTED = "computed"  # 引数なし、または文字列リテラル以外
