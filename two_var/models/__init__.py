"""Data models for declaration style checking."""

from .violation import Violation, SourceLocation, ViolationCategory, RULE_ID
from .classification import DeclaratorClass, LoadProvenance
from .policy import (
    DeclarationKind,
    Mode,
    KindPolicy,
    PolicyTable,
    RuleOptions,
    build_policy_table,
    parse_grouping_option,
)

__all__ = [
    "Violation",
    "SourceLocation",
    "ViolationCategory",
    "RULE_ID",
    "DeclaratorClass",
    "LoadProvenance",
    "DeclarationKind",
    "Mode",
    "KindPolicy",
    "PolicyTable",
    "RuleOptions",
    "build_policy_table",
    "parse_grouping_option",
]
