"""宣言の結合/分割ポリシーモデル。

ルールオプション（文字列またはオブジェクト）をルール生成時に一度だけ正規化し、
宣言種別ごとの不変なポリシーテーブルを作成する。
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union
from enum import Enum
import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class DeclarationKind(str, Enum):
    """宣言の種別。"""
    VAR = "var"      # 関数スコープ
    LET = "let"      # ブロックスコープ
    CONST = "const"  # ブロックスコープ

    @property
    def is_function_scoped(self) -> bool:
        return self is DeclarationKind.VAR


class Mode(Enum):
    """結合/分割のモード。"""
    ALWAYS = "always"  # 1つの文にまとめる
    NEVER = "never"    # 別々の文に分ける
    UNSET = "unset"    # チェックしない

    @classmethod
    def parse(cls, value: Optional[str]) -> "Mode":
        """文字列からモードをパースする。

        認識できない値はUNSETとして扱う。

        Args:
            value: モード文字列（"always" / "never"）

        Returns:
            Mode列挙値
        """
        if value is None:
            return cls.UNSET

        value_str = str(value).lower().strip()
        if value_str == "always":
            return cls.ALWAYS
        if value_str == "never":
            return cls.NEVER

        logger.warning(f"Unknown mode '{value}', treating as unset")
        return cls.UNSET


@dataclass(frozen=True)
class KindPolicy:
    """1つの宣言種別に対するポリシー。"""
    uninitialized: Mode = Mode.UNSET
    initialized: Mode = Mode.UNSET

    @property
    def both_always(self) -> bool:
        return self.uninitialized is Mode.ALWAYS and self.initialized is Mode.ALWAYS

    @property
    def both_never(self) -> bool:
        return self.uninitialized is Mode.NEVER and self.initialized is Mode.NEVER

    def is_unset(self) -> bool:
        """両軸ともチェック対象外かどうか。"""
        return self.uninitialized is Mode.UNSET and self.initialized is Mode.UNSET


@dataclass(frozen=True)
class PolicyTable:
    """宣言種別からポリシーへの不変テーブル。"""
    policies: Mapping[DeclarationKind, KindPolicy]

    def policy_for(self, kind: DeclarationKind) -> Optional[KindPolicy]:
        """種別のポリシーを取得する。未設定の場合はNone。"""
        return self.policies.get(kind)

    def __str__(self) -> str:
        parts = [
            f"{kind.value}(uninitialized={p.uninitialized.value}, "
            f"initialized={p.initialized.value})"
            for kind, p in self.policies.items()
        ]
        return ", ".join(parts) if parts else "<no policies>"


class RuleOptions(BaseModel):
    """オブジェクト形式のルールオプション。"""

    model_config = ConfigDict(extra="ignore")

    var: Optional[str] = Field(default=None, description="var宣言のモード")
    let: Optional[str] = Field(default=None, description="let宣言のモード")
    const: Optional[str] = Field(default=None, description="const宣言のモード")
    uninitialized: Optional[str] = Field(
        default=None,
        description="全種別の未初期化宣言に適用するモード"
    )
    initialized: Optional[str] = Field(
        default=None,
        description="全種別の初期化済み宣言に適用するモード"
    )

    @field_validator("var", "let", "const", "uninitialized", "initialized", mode="before")
    @classmethod
    def _ignore_non_string(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value
        logger.warning(f"Ignoring non-string mode option: {value!r}")
        return None

    def mode_for(self, kind: DeclarationKind) -> Optional[str]:
        return getattr(self, kind.value)


DEFAULT_MODE = "always"

ModeOption = Union[None, str, Mapping[str, Any], RuleOptions]


def build_policy_table(option: ModeOption = None) -> PolicyTable:
    """ルールオプションを正規化してポリシーテーブルを作成する。

    Args:
        option: None、モード文字列、またはオブジェクト形式のオプション

    Returns:
        不変のPolicyTable
    """
    if option is None:
        option = DEFAULT_MODE

    policies: Dict[DeclarationKind, KindPolicy] = {}

    if isinstance(option, str):
        mode = Mode.parse(option)
        for kind in DeclarationKind:
            policies[kind] = KindPolicy(uninitialized=mode, initialized=mode)

    elif isinstance(option, (Mapping, RuleOptions)):
        options = option if isinstance(option, RuleOptions) else RuleOptions.model_validate(dict(option))

        for kind in DeclarationKind:
            kind_mode = options.mode_for(kind)
            # 種別ごとの指定が全体指定より優先される
            uninitialized = kind_mode if kind_mode is not None else options.uninitialized
            initialized = kind_mode if kind_mode is not None else options.initialized

            if uninitialized is None and initialized is None:
                continue

            policy = KindPolicy(
                uninitialized=Mode.parse(uninitialized),
                initialized=Mode.parse(initialized),
            )
            if not policy.is_unset():
                policies[kind] = policy

    else:
        logger.warning(f"Unsupported rule option type: {type(option).__name__}")

    table = PolicyTable(policies=MappingProxyType(policies))
    logger.debug(f"Policy table: {table}")
    return table


def parse_grouping_option(option: Any) -> bool:
    """requireグループ化オプションをパースする。

    真偽値、または{"grouping": bool}形式を受け付ける。
    それ以外の値（"false"などの文字列を含む）は無効としてFalseを返す。

    Args:
        option: グループ化オプション

    Returns:
        グループ化チェックを有効にする場合True
    """
    if isinstance(option, Mapping):
        option = option.get("grouping", False)

    if option is None:
        return False
    if isinstance(option, bool):
        return option

    logger.warning(f"Invalid grouping option {option!r}, treating as disabled")
    return False
