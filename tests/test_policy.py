"""ルールオプション正規化のテスト。"""

import dataclasses

import pytest

from two_var.models.policy import (
    DeclarationKind,
    KindPolicy,
    Mode,
    RuleOptions,
    build_policy_table,
    parse_grouping_option,
)

ALL_ALWAYS = KindPolicy(uninitialized=Mode.ALWAYS, initialized=Mode.ALWAYS)
ALL_NEVER = KindPolicy(uninitialized=Mode.NEVER, initialized=Mode.NEVER)


class TestBuildPolicyTable:
    """build_policy_table()のテスト。"""

    def test_default_is_always(self):
        """オプションなしは全種別always。"""
        table = build_policy_table()
        for kind in DeclarationKind:
            assert table.policy_for(kind) == ALL_ALWAYS

    def test_string_mode(self):
        table = build_policy_table("never")
        for kind in DeclarationKind:
            assert table.policy_for(kind) == ALL_NEVER

    def test_string_mode_is_case_insensitive(self):
        assert build_policy_table("Always").policy_for(DeclarationKind.VAR) == ALL_ALWAYS

    def test_kind_specific(self):
        """種別ごとの指定がない種別はチェックしない。"""
        table = build_policy_table({"var": "always", "let": "never"})
        assert table.policy_for(DeclarationKind.VAR) == ALL_ALWAYS
        assert table.policy_for(DeclarationKind.LET) == ALL_NEVER
        assert table.policy_for(DeclarationKind.CONST) is None

    def test_global_axis_applies_to_all_kinds(self):
        table = build_policy_table({"uninitialized": "always", "initialized": "never"})
        expected = KindPolicy(uninitialized=Mode.ALWAYS, initialized=Mode.NEVER)
        for kind in DeclarationKind:
            assert table.policy_for(kind) == expected

    def test_single_global_axis(self):
        table = build_policy_table({"initialized": "never"})
        policy = table.policy_for(DeclarationKind.CONST)
        assert policy.initialized is Mode.NEVER
        assert policy.uninitialized is Mode.UNSET

    def test_kind_specific_takes_precedence(self):
        """種別ごとの指定は全体指定より優先される。"""
        table = build_policy_table({"var": "never", "uninitialized": "always"})
        assert table.policy_for(DeclarationKind.VAR) == ALL_NEVER
        assert table.policy_for(DeclarationKind.LET) == KindPolicy(uninitialized=Mode.ALWAYS)

    def test_unknown_keys_are_ignored(self):
        table = build_policy_table({"function": "always", "var": "never"})
        assert table.policy_for(DeclarationKind.VAR) == ALL_NEVER

    def test_unknown_mode_is_unset(self):
        table = build_policy_table({"var": "sometimes"})
        assert table.policy_for(DeclarationKind.VAR) is None

    def test_non_string_mode_is_ignored(self):
        table = build_policy_table({"var": {"uninitialized": "always"}, "let": "always"})
        assert table.policy_for(DeclarationKind.VAR) is None
        assert table.policy_for(DeclarationKind.LET) == ALL_ALWAYS

    def test_accepts_rule_options_model(self):
        table = build_policy_table(RuleOptions(const="never"))
        assert table.policy_for(DeclarationKind.CONST) == ALL_NEVER

    def test_unsupported_type(self):
        table = build_policy_table(42)
        assert table.policy_for(DeclarationKind.VAR) is None

    def test_table_is_immutable(self):
        table = build_policy_table()
        with pytest.raises(TypeError):
            table.policies[DeclarationKind.VAR] = ALL_NEVER
        with pytest.raises(dataclasses.FrozenInstanceError):
            table.policy_for(DeclarationKind.VAR).initialized = Mode.NEVER


class TestGroupingOption:
    """parse_grouping_option()のテスト。"""

    @pytest.mark.parametrize("option, expected", [
        (None, False),
        (False, False),
        (True, True),
        ({"grouping": True}, True),
        ({}, False),
        ("false", False),
        ("true", False),
        (1, False),
        ({"grouping": "false"}, False),
    ])
    def test_parse(self, option, expected):
        assert parse_grouping_option(option) is expected
