"""two-varルール本体。

require()による宣言のまとまりと、それ以外の宣言のまとまりを分けるよう、
var / let / const 宣言文の結合・分割とrequire()の混在をチェックする。
"""

from typing import Any, Callable, Dict, List, Optional
import logging

from ..analyzer.traversal import EXIT_SUFFIX, Handler, node_get, node_position, node_type
from ..models.policy import (
    DeclarationKind,
    KindPolicy,
    Mode,
    ModeOption,
    PolicyTable,
    build_policy_table,
    parse_grouping_option,
)
from ..models.violation import SourceLocation, Violation
from .declaration_classifier import is_grouped, is_mixed
from .scope_tracker import DeclarationCounts, ScopeTracker

logger = logging.getLogger(__name__)

# (node, message) を受け取る報告先
ReportSink = Callable[[Any, str], None]

FUNCTION_NODES = (
    "Program",
    "FunctionDeclaration",
    "FunctionExpression",
    "ArrowFunctionExpression",
)

BLOCK_NODES = (
    "BlockStatement",
    "ForStatement",
    "ForInStatement",
    "ForOfStatement",
    "SwitchStatement",
)

MIXED_REQUIRE_MESSAGE = "Do not mix 'require' and other declarations."
GROUPING_MESSAGE = "Do not mix core, module, file and computed requires."


def combine_message(kind: DeclarationKind, qualifier: Optional[str] = None) -> str:
    if qualifier is None:
        return f"Combine this with the previous '{kind.value}' statement."
    return f"Combine this with the previous '{kind.value}' statement with {qualifier} variables."


def split_message(kind: DeclarationKind, qualifier: Optional[str] = None) -> str:
    if qualifier is None:
        return f"Split '{kind.value}' declarations into multiple statements."
    return f"Split {qualifier} '{kind.value}' declarations into multiple statements."


class TwoVarRule:
    """宣言文のスタイルチェックルール。

    1つの構文木につき1つのインスタンスを使う。スコープの状態は
    インスタンスが専有する。
    """

    def __init__(
        self,
        mode_option: ModeOption = None,
        grouping_option: Any = False,
        report: Optional[ReportSink] = None,
        file_path: str = "<input>"
    ):
        """ルールを初期化する。

        Args:
            mode_option: 結合/分割のオプション（文字列またはオブジェクト）
            grouping_option: requireの出所グループ化チェックを有効にするか
            report: 違反の報告先（省略時はviolationsに収集）
            file_path: 違反の位置情報に使うファイルパス
        """
        self.policies: PolicyTable = build_policy_table(mode_option)
        self.grouping = parse_grouping_option(grouping_option)
        self.file_path = file_path
        self.scopes = ScopeTracker()
        self.violations: List[Violation] = []
        self._report = report or self._collect

    def _collect(self, node: Any, message: str) -> None:
        line, column = node_position(node)
        self.violations.append(
            Violation(
                message=message,
                node_type=node_type(node) or "",
                location=SourceLocation(file_path=self.file_path, line=line, column=column),
            )
        )

    def report(self, node: Any, message: str) -> None:
        logger.debug(f"{self.file_path}: {message}")
        self._report(node, message)

    def handlers(self) -> Dict[str, Handler]:
        """走査器に登録するコールバックを返す。

        Returns:
            ノード型名（および "<型名>:exit"）からコールバックへのマッピング
        """
        handlers: Dict[str, Handler] = {}

        for name in FUNCTION_NODES:
            handlers[name] = self._enter_function
            handlers[name + EXIT_SUFFIX] = self._exit_function

        for name in BLOCK_NODES:
            handlers[name] = self._enter_block
            handlers[name + EXIT_SUFFIX] = self._exit_block

        handlers["VariableDeclaration"] = self.check_declaration
        return handlers

    def _enter_function(self, node: Any, parent: Any) -> None:
        self.scopes.enter_function()

    def _exit_function(self, node: Any, parent: Any) -> None:
        self.scopes.exit_function()

    def _enter_block(self, node: Any, parent: Any) -> None:
        self.scopes.enter_block()

    def _exit_block(self, node: Any, parent: Any) -> None:
        self.scopes.exit_block()

    def check_declaration(self, node: Any, parent: Any) -> None:
        """宣言文をチェックする。

        Args:
            node: VariableDeclarationノード
            parent: 親ノード
        """
        declarations = list(node_get(node, "declarations") or [])

        try:
            kind = DeclarationKind(node_get(node, "kind"))
        except ValueError:
            kind = None

        policy = self.policies.policy_for(kind) if kind is not None else None
        if policy is not None:
            counts = DeclarationCounts.from_declarators(declarations)
            self._check_combine(node, kind, policy, declarations)
            if not self._is_for_init(node, parent):
                self._check_split(node, kind, policy, counts)

        self._check_requires(node, declarations)

    def _check_combine(
        self,
        node: Any,
        kind: DeclarationKind,
        policy: KindPolicy,
        declarations: List[Any]
    ) -> None:
        if self.scopes.first_of_kind_in_scope(kind, policy, declarations):
            return

        if policy.both_always:
            self.report(node, combine_message(kind))
            return

        if policy.initialized is Mode.ALWAYS:
            self.report(node, combine_message(kind, "initialized"))
        if policy.uninitialized is Mode.ALWAYS:
            self.report(node, combine_message(kind, "uninitialized"))

    def _check_split(
        self,
        node: Any,
        kind: DeclarationKind,
        policy: KindPolicy,
        counts: DeclarationCounts
    ) -> None:
        if counts.total <= 1:
            return

        initialized = counts.initialized + counts.loaded

        if policy.both_never:
            self.report(node, split_message(kind))
        elif policy.initialized is Mode.NEVER and initialized > 0:
            self.report(node, split_message(kind, "initialized"))
        elif policy.uninitialized is Mode.NEVER and counts.uninitialized > 0:
            self.report(node, split_message(kind, "uninitialized"))

    def _check_requires(self, node: Any, declarations: List[Any]) -> None:
        if is_mixed(declarations):
            self.report(node, MIXED_REQUIRE_MESSAGE)
        elif self.grouping and not is_grouped(declarations):
            self.report(node, GROUPING_MESSAGE)

    @staticmethod
    def _is_for_init(node: Any, parent: Any) -> bool:
        # for (var a = 0, b = 1; ...) は分割できない
        return node_type(parent) == "ForStatement" and node_get(parent, "init") is node
