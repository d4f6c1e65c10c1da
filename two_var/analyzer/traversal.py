"""ESTree構文木の深さ優先走査。

esprimaのノードオブジェクトと、テスト等で使うdict形式のノードの両方を扱う。
"""

from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

# (node, parent) を受け取るコールバック
Handler = Callable[[Any, Optional[Any]], None]

EXIT_SUFFIX = ":exit"

# 子ノードとして辿らないフィールド
_SKIP_FIELDS = frozenset({"type", "loc", "range", "parent", "leadingComments", "trailingComments"})


def node_get(node: Any, key: str, default: Any = None) -> Any:
    """ノードのフィールド値を取得する。

    Args:
        node: esprimaノードまたはdict
        key: フィールド名
        default: フィールドがない場合の値

    Returns:
        フィールド値
    """
    if node is None:
        return default
    if isinstance(node, Mapping):
        return node.get(key, default)
    value = getattr(node, key, default)
    return default if value is None else value


def node_type(node: Any) -> Optional[str]:
    """ノードの型名を取得する。"""
    return node_get(node, "type")


def is_node(value: Any) -> bool:
    """値がESTreeノードかどうか。"""
    return isinstance(node_type(value), str) if value is not None else False


def node_position(node: Any) -> Tuple[int, Optional[int]]:
    """ノードの開始位置（行, 列）を取得する。

    位置情報がない場合は (0, None) を返す。
    """
    loc = node_get(node, "loc")
    start = node_get(loc, "start")
    if start is None:
        return 0, None
    return node_get(start, "line", 0), node_get(start, "column")


def _fields(node: Any) -> Iterator[Tuple[str, Any]]:
    if isinstance(node, Mapping):
        return iter(node.items())
    return iter(vars(node).items())


def iter_child_nodes(node: Any) -> Iterator[Any]:
    """子ノードをフィールド順に列挙する。"""
    for key, value in _fields(node):
        if key in _SKIP_FIELDS or value is None:
            continue
        if isinstance(value, (list, tuple)):
            for item in value:
                if is_node(item):
                    yield item
        elif is_node(value):
            yield value


class TreeWalker:
    """登録されたコールバックを呼び出しながら構文木を深さ優先で走査する。

    ハンドラーのキーはノード型名（進入時）と "<型名>:exit"（退出時）。
    """

    def __init__(self, handlers: Dict[str, Handler]):
        """走査器を初期化する。

        Args:
            handlers: ノード型名からコールバックへのマッピング
        """
        self.handlers = dict(handlers)
        self.visited = 0

    def walk(self, root: Any) -> None:
        """ルートノードから走査する。

        Args:
            root: 走査を開始するノード（通常はProgram）
        """
        self.visited = 0

        # 深い式でも再帰上限に達しないよう明示的なスタックで辿る
        # 要素は (node, parent, exiting)
        stack: List[Tuple[Any, Optional[Any], bool]] = [(root, None, False)]
        while stack:
            node, parent, exiting = stack.pop()
            kind = node_type(node)

            if exiting:
                leave = self.handlers.get(kind + EXIT_SUFFIX)
                if leave is not None:
                    leave(node, parent)
                continue

            self.visited += 1
            enter = self.handlers.get(kind)
            if enter is not None:
                enter(node, parent)

            stack.append((node, parent, True))
            children = list(iter_child_nodes(node))
            for child in reversed(children):
                stack.append((child, node, False))

        logger.debug(f"Visited {self.visited} nodes")


def walk(root: Any, handlers: Dict[str, Handler]) -> TreeWalker:
    """構文木を走査する簡易関数。

    Args:
        root: ルートノード
        handlers: コールバックのマッピング

    Returns:
        走査に使ったTreeWalker
    """
    walker = TreeWalker(handlers)
    walker.walk(root)
    return walker
