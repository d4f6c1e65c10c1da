"""ルール違反の指摘情報モデル。"""

from dataclasses import dataclass
from typing import Optional
from enum import Enum
import os


RULE_ID = "two-var"


class ViolationCategory(Enum):
    """違反メッセージの種別。"""
    COMBINE = "combine"
    SPLIT = "split"
    MIXED = "mixed"
    GROUPING = "grouping"

    @classmethod
    def from_message(cls, message: str) -> "ViolationCategory":
        """メッセージ文字列から種別を判定する。

        Args:
            message: 違反メッセージ

        Returns:
            ViolationCategory列挙値
        """
        if message.startswith("Combine"):
            return cls.COMBINE
        if message.startswith("Split"):
            return cls.SPLIT
        if message.startswith("Do not mix 'require'"):
            return cls.MIXED
        return cls.GROUPING


@dataclass
class SourceLocation:
    """ソースコードの位置情報。"""
    file_path: str
    line: int
    column: Optional[int] = None

    def __post_init__(self):
        # Windowsパスを正規化
        if self.file_path:
            self.file_path = os.path.normpath(self.file_path)

    def __str__(self) -> str:
        if self.column is not None:
            return f"{self.file_path}:{self.line}:{self.column}"
        return f"{self.file_path}:{self.line}"


@dataclass
class Violation:
    """宣言スタイル違反。"""
    message: str
    node_type: str
    location: SourceLocation
    rule_id: str = RULE_ID

    @property
    def category(self) -> ViolationCategory:
        """違反の種別。"""
        return ViolationCategory.from_message(self.message)

    def to_dict(self) -> dict:
        """出力用の辞書に変換する。

        Returns:
            違反情報を含む辞書
        """
        return {
            "file": self.location.file_path,
            "line": self.location.line,
            "column": self.location.column,
            "rule": self.rule_id,
            "category": self.category.value,
            "message": self.message,
        }

    def __str__(self) -> str:
        return f"{self.location}: {self.message} ({self.rule_id})"
