"""関数スコープとブロックスコープの宣言状態の追跡。"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List
import logging

from ..models.classification import DeclaratorClass
from ..models.policy import DeclarationKind, KindPolicy, Mode
from .declaration_classifier import classify_declarator

logger = logging.getLogger(__name__)


class ScopeStackError(RuntimeError):
    """スコープの進入/退出が対応していない場合のエラー。"""
    pass


@dataclass
class ScopeFlags:
    """1つのスコープで既に出現した宣言文の状態。"""
    initialized: bool = False
    uninitialized: bool = False
    loaded: bool = False  # require()による初期化


@dataclass
class BlockScope:
    """ブロックスコープの記録（let / const）。"""
    let: ScopeFlags = field(default_factory=ScopeFlags)
    const: ScopeFlags = field(default_factory=ScopeFlags)


@dataclass
class DeclarationCounts:
    """1つの宣言文に含まれる宣言子の内訳。"""
    uninitialized: int = 0
    initialized: int = 0
    loaded: int = 0

    @property
    def total(self) -> int:
        return self.uninitialized + self.initialized + self.loaded

    @property
    def non_loaded(self) -> int:
        return self.uninitialized + self.initialized

    @classmethod
    def from_declarators(cls, declarators: Iterable[Any]) -> "DeclarationCounts":
        """宣言子のリストから内訳を数える。

        Args:
            declarators: VariableDeclaratorノードのリスト

        Returns:
            DeclarationCountsインスタンス
        """
        counts = cls()
        for declarator in declarators:
            declarator_class = classify_declarator(declarator)
            if declarator_class is DeclaratorClass.UNINITIALIZED:
                counts.uninitialized += 1
            elif declarator_class is DeclaratorClass.DYNAMIC_LOAD:
                counts.loaded += 1
            else:
                counts.initialized += 1
        return counts


class ScopeTracker:
    """関数スコープのスタックとブロックスコープのスタックを管理する。

    varは関数スコープ、let / constはブロックスコープで追跡する。
    関数への進入はブロックへの進入も兼ねるため、ブロックスタックは常に
    関数スタック以上の深さを持つ。
    """

    def __init__(self):
        """スコープ追跡器を初期化する。"""
        self.function_stack: List[ScopeFlags] = []
        self.block_stack: List[BlockScope] = []

    def enter_function(self) -> None:
        """関数スコープに進入する。"""
        self.function_stack.append(ScopeFlags())
        self.enter_block()

    def exit_function(self) -> None:
        """関数スコープから退出する。

        Raises:
            ScopeStackError: 対応する進入がない場合
        """
        if not self.function_stack:
            raise ScopeStackError("exit_function() without matching enter_function()")
        self.function_stack.pop()
        self.exit_block()

    def enter_block(self) -> None:
        """ブロックスコープに進入する。"""
        self.block_stack.append(BlockScope())

    def exit_block(self) -> None:
        """ブロックスコープから退出する。

        Raises:
            ScopeStackError: 対応する進入がない場合
        """
        if not self.block_stack:
            raise ScopeStackError("exit_block() without matching enter_block()")
        self.block_stack.pop()

    def current_scope_for(self, kind: DeclarationKind) -> ScopeFlags:
        """宣言種別に対応する現在のスコープ記録を取得する。

        Args:
            kind: 宣言種別

        Returns:
            varの場合は関数スコープ、let / constの場合はブロックスコープの記録

        Raises:
            ScopeStackError: スコープに進入していない場合
        """
        if kind.is_function_scoped:
            if not self.function_stack:
                raise ScopeStackError("No active function scope")
            return self.function_stack[-1]

        if not self.block_stack:
            raise ScopeStackError("No active block scope")
        block = self.block_stack[-1]
        return block.let if kind is DeclarationKind.LET else block.const

    def first_of_kind_in_scope(
        self,
        kind: DeclarationKind,
        policy: KindPolicy,
        declarators: List[Any]
    ) -> bool:
        """宣言文が現在のスコープでその状態の最初の文かどうかを判定する。

        判定結果にかかわらず、この文の宣言子をスコープ記録に反映する。
        require()による初期化は他の宣言とは別のまとまりとして扱う。

        Args:
            kind: 宣言種別
            policy: 宣言種別のポリシー
            declarators: 宣言文に含まれる宣言子

        Returns:
            最初の文の場合True（違反なし）
        """
        scope = self.current_scope_for(kind)
        counts = DeclarationCounts.from_declarators(declarators)
        first = True

        if policy.both_always:
            if counts.non_loaded > 0 and (scope.uninitialized or scope.initialized):
                first = False
            if counts.loaded > 0 and scope.loaded:
                first = False

        if policy.uninitialized is Mode.ALWAYS:
            if counts.uninitialized > 0 and scope.uninitialized:
                first = False

        if policy.initialized is Mode.ALWAYS:
            if counts.initialized > 0 and scope.initialized:
                first = False
            if counts.loaded > 0 and scope.loaded:
                first = False

        self._record(scope, policy, counts)
        return first

    @staticmethod
    def _record(scope: ScopeFlags, policy: KindPolicy, counts: DeclarationCounts) -> None:
        if policy.uninitialized is Mode.ALWAYS and counts.uninitialized > 0:
            scope.uninitialized = True
        if policy.initialized is Mode.ALWAYS:
            if counts.initialized > 0:
                scope.initialized = True
            if counts.loaded > 0:
                scope.loaded = True
