"""two-var宣言スタイルルール。"""

from .scope_tracker import ScopeTracker, ScopeStackError, ScopeFlags, BlockScope
from .declaration_classifier import classify, provenance_of, is_mixed, is_grouped
from .two_var_rule import TwoVarRule

__all__ = [
    "ScopeTracker",
    "ScopeStackError",
    "ScopeFlags",
    "BlockScope",
    "classify",
    "provenance_of",
    "is_mixed",
    "is_grouped",
    "TwoVarRule",
]
