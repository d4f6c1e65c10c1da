"""esprimaを使用したJavaScriptソースコード解析モジュール。"""

from .js_parser import JsParser, JsParseError
from .traversal import TreeWalker, walk, node_get, node_type, node_position

__all__ = [
    "JsParser",
    "JsParseError",
    "TreeWalker",
    "walk",
    "node_get",
    "node_type",
    "node_position",
]
