"""スコープ追跡のテスト。"""

import pytest

from two_var.models.policy import DeclarationKind, KindPolicy, Mode
from two_var.rule.scope_tracker import ScopeTracker, ScopeStackError, DeclarationCounts

ALWAYS = KindPolicy(uninitialized=Mode.ALWAYS, initialized=Mode.ALWAYS)
INIT_ALWAYS = KindPolicy(initialized=Mode.ALWAYS)
UNINIT_ALWAYS = KindPolicy(uninitialized=Mode.ALWAYS)


def declarator(init=None):
    return {"type": "VariableDeclarator", "id": {"type": "Identifier", "name": "x"}, "init": init}


def value():
    return declarator({"type": "Literal", "value": 1})


def loaded():
    return declarator({
        "type": "CallExpression",
        "callee": {"type": "Identifier", "name": "require"},
        "arguments": [{"type": "Literal", "value": "x"}],
    })


@pytest.fixture
def tracker():
    t = ScopeTracker()
    t.enter_function()
    return t


class TestStacks:
    """スタック操作のテスト。"""

    def test_enter_function_pushes_block(self):
        """関数への進入はブロックも積む。"""
        t = ScopeTracker()
        t.enter_function()
        assert len(t.function_stack) == 1
        assert len(t.block_stack) == 1

    def test_exit_function_pops_block(self):
        t = ScopeTracker()
        t.enter_function()
        t.enter_block()
        t.exit_block()
        t.exit_function()
        assert t.function_stack == []
        assert t.block_stack == []

    def test_unbalanced_exit_function(self):
        with pytest.raises(ScopeStackError):
            ScopeTracker().exit_function()

    def test_unbalanced_exit_block(self):
        with pytest.raises(ScopeStackError):
            ScopeTracker().exit_block()

    def test_current_scope_without_enter(self):
        with pytest.raises(ScopeStackError):
            ScopeTracker().current_scope_for(DeclarationKind.VAR)

    def test_current_scope_for_kinds(self, tracker):
        """varは関数スコープ、let / constはブロックスコープの記録を返す。"""
        assert tracker.current_scope_for(DeclarationKind.VAR) is tracker.function_stack[-1]
        assert tracker.current_scope_for(DeclarationKind.LET) is tracker.block_stack[-1].let
        assert tracker.current_scope_for(DeclarationKind.CONST) is tracker.block_stack[-1].const


class TestDeclarationCounts:
    """DeclarationCountsのテスト。"""

    def test_counts(self):
        counts = DeclarationCounts.from_declarators([declarator(), value(), value(), loaded()])
        assert counts.uninitialized == 1
        assert counts.initialized == 2
        assert counts.loaded == 1
        assert counts.total == 4
        assert counts.non_loaded == 3


class TestFirstOfKindInScope:
    """first_of_kind_in_scope()のテスト。"""

    def test_first_statement(self, tracker):
        assert tracker.first_of_kind_in_scope(DeclarationKind.VAR, ALWAYS, [value()])

    def test_second_statement(self, tracker):
        tracker.first_of_kind_in_scope(DeclarationKind.VAR, ALWAYS, [value()])
        assert not tracker.first_of_kind_in_scope(DeclarationKind.VAR, ALWAYS, [value()])

    def test_both_always_combines_initialized_and_uninitialized(self, tracker):
        """両軸alwaysでは初期化済みと未初期化も同じ文にまとめる。"""
        tracker.first_of_kind_in_scope(DeclarationKind.VAR, ALWAYS, [declarator()])
        assert not tracker.first_of_kind_in_scope(DeclarationKind.VAR, ALWAYS, [value()])

    def test_require_statement_is_separate_group(self, tracker):
        """require()の文は他の宣言とは別のまとまり。"""
        tracker.first_of_kind_in_scope(DeclarationKind.VAR, ALWAYS, [value()])
        assert tracker.first_of_kind_in_scope(DeclarationKind.VAR, ALWAYS, [loaded()])
        assert not tracker.first_of_kind_in_scope(DeclarationKind.VAR, ALWAYS, [loaded()])

    def test_initialized_only_policy(self, tracker):
        """initializedのみalwaysの場合、未初期化の文は何度でも許可される。"""
        assert tracker.first_of_kind_in_scope(DeclarationKind.VAR, INIT_ALWAYS, [declarator()])
        assert tracker.first_of_kind_in_scope(DeclarationKind.VAR, INIT_ALWAYS, [declarator()])
        assert tracker.first_of_kind_in_scope(DeclarationKind.VAR, INIT_ALWAYS, [value()])
        assert not tracker.first_of_kind_in_scope(DeclarationKind.VAR, INIT_ALWAYS, [value()])

    def test_uninitialized_only_policy(self, tracker):
        assert tracker.first_of_kind_in_scope(DeclarationKind.VAR, UNINIT_ALWAYS, [value()])
        assert tracker.first_of_kind_in_scope(DeclarationKind.VAR, UNINIT_ALWAYS, [declarator()])
        assert not tracker.first_of_kind_in_scope(DeclarationKind.VAR, UNINIT_ALWAYS, [declarator()])

    def test_records_even_when_not_first(self, tracker):
        """違反と判定された文も宣言状態をスコープに記録する。"""
        tracker.first_of_kind_in_scope(DeclarationKind.VAR, UNINIT_ALWAYS, [declarator()])
        scope = tracker.current_scope_for(DeclarationKind.VAR)
        assert not scope.initialized

        # initialized軸はチェックしないが、両軸alwaysのポリシーでは記録される
        assert not tracker.first_of_kind_in_scope(
            DeclarationKind.VAR, ALWAYS, [declarator(), value()]
        )
        assert scope.initialized
        assert scope.uninitialized

    def test_function_scopes_are_isolated(self, tracker):
        tracker.first_of_kind_in_scope(DeclarationKind.VAR, ALWAYS, [value()])
        tracker.enter_function()
        assert tracker.first_of_kind_in_scope(DeclarationKind.VAR, ALWAYS, [value()])
        tracker.exit_function()
        assert not tracker.first_of_kind_in_scope(DeclarationKind.VAR, ALWAYS, [value()])

    def test_var_ignores_blocks(self, tracker):
        """varはブロックを越えて関数スコープで追跡される。"""
        tracker.first_of_kind_in_scope(DeclarationKind.VAR, ALWAYS, [value()])
        tracker.enter_block()
        assert not tracker.first_of_kind_in_scope(DeclarationKind.VAR, ALWAYS, [value()])

    def test_sibling_blocks_are_isolated(self, tracker):
        for kind in (DeclarationKind.LET, DeclarationKind.CONST):
            tracker.enter_block()
            assert tracker.first_of_kind_in_scope(kind, ALWAYS, [value()])
            tracker.exit_block()
            tracker.enter_block()
            assert tracker.first_of_kind_in_scope(kind, ALWAYS, [value()])
            tracker.exit_block()

    def test_let_and_const_tracked_separately(self, tracker):
        tracker.first_of_kind_in_scope(DeclarationKind.LET, ALWAYS, [value()])
        assert tracker.first_of_kind_in_scope(DeclarationKind.CONST, ALWAYS, [value()])
