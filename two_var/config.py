"""設定管理モジュール。"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any, Union
from pathlib import Path
import fnmatch
import os
import logging

import yaml

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = ("*.js", "*.cjs", "*.mjs")

DEFAULT_EXCLUDE_PATTERNS = ["node_modules/*", "*/node_modules/*", "*.min.js"]


@dataclass
class Config:
    """アプリケーション設定。"""

    # ルールオプション（"always" / "never" またはオブジェクト）
    rule_options: Union[str, Dict[str, Any]] = "always"

    # requireの出所グループ化チェック
    grouping: bool = False

    # esprimaのソース種別（script / module）
    source_type: str = "script"

    # チェック対象
    source_directories: List[str] = field(default_factory=list)
    exclude_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))

    # Excelレポートの出力先
    report_file: Optional[str] = None

    # ロギング設定
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    @classmethod
    def from_yaml(cls, file_path: str) -> "Config":
        """YAMLファイルから設定を読み込む。

        ESLint形式の `two-var: [mode, grouping]` も受け付ける。

        Args:
            file_path: YAML設定ファイルのパス

        Returns:
            Configインスタンス
        """
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        config = cls()

        rule_entry = data.get("two-var")
        if isinstance(rule_entry, list):
            if len(rule_entry) > 0:
                config.rule_options = rule_entry[0]
            if len(rule_entry) > 1:
                config.grouping = rule_entry[1]
        else:
            config.rule_options = data.get("rule_options", config.rule_options)
            config.grouping = data.get("grouping", config.grouping)

        config.source_type = data.get("source_type", config.source_type)
        config.source_directories = data.get("source_directories", [])
        config.exclude_patterns = data.get("exclude_patterns", config.exclude_patterns)
        config.report_file = data.get("report_file")

        # ロギング（環境変数が優先）
        config.log_level = os.getenv(
            "TWO_VAR_LOG_LEVEL",
            data.get("log_level", config.log_level)
        )
        config.log_file = data.get("log_file")

        logger.info(f"Configuration loaded from {file_path}")
        return config

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """辞書から設定を作成する。

        Args:
            data: 設定辞書

        Returns:
            Configインスタンス
        """
        config = cls()

        for key, value in data.items():
            if hasattr(config, key):
                setattr(config, key, value)

        return config

    def validate(self) -> List[str]:
        """設定を検証する。

        Returns:
            検証エラーのリスト（有効な場合は空）
        """
        errors = []

        if self.source_type not in ("script", "module"):
            errors.append(f"source_typeはscriptまたはmoduleです: {self.source_type}")

        # Noneはデフォルト（always）として扱われる
        if self.rule_options is not None and not isinstance(self.rule_options, (str, dict)):
            errors.append(
                f"rule_optionsは文字列またはオブジェクトです: {type(self.rule_options).__name__}"
            )

        grouping = self.grouping
        if isinstance(grouping, dict):
            grouping = grouping.get("grouping", False)
        if not isinstance(grouping, bool):
            errors.append(f"groupingは真偽値です: {self.grouping!r}")

        for path in self.source_directories:
            if not Path(path).exists():
                errors.append(f"ソースディレクトリが存在しません: {path}")

        return errors

    def to_dict(self) -> dict:
        """設定を辞書に変換する。

        Returns:
            辞書形式の設定
        """
        return {
            "rule_options": self.rule_options,
            "grouping": self.grouping,
            "source_type": self.source_type,
            "source_directories": self.source_directories,
            "exclude_patterns": self.exclude_patterns,
            "report_file": self.report_file,
            "log_level": self.log_level,
            "log_file": self.log_file,
        }

    def is_excluded(self, file_path: str) -> bool:
        """ファイルが除外パターンに一致するかどうか。"""
        normalized = Path(file_path).as_posix()
        return any(fnmatch.fnmatch(normalized, pattern) for pattern in self.exclude_patterns)

    def get_source_files(self, paths: Optional[List[str]] = None) -> List[str]:
        """チェック対象のソースファイルを取得する。

        Args:
            paths: ファイルまたはディレクトリのリスト（省略時はsource_directories）

        Returns:
            ソースファイルパスのリスト（ソート済み）
        """
        source_files = []

        for entry in paths or self.source_directories:
            path = Path(entry)
            if path.is_file():
                # 明示的に指定されたファイルは除外パターンを適用しない
                source_files.append(str(path))
            elif path.is_dir():
                for pattern in SOURCE_EXTENSIONS:
                    source_files.extend(
                        str(f) for f in path.rglob(pattern)
                        if not self.is_excluded(str(f.relative_to(path)))
                    )
            else:
                logger.warning(f"Path does not exist: {entry}")

        source_files = sorted(set(source_files))
        logger.debug(f"Found {len(source_files)} source files")
        return source_files

    def save_yaml(self, file_path: str) -> None:
        """設定をYAMLファイルに保存。

        Args:
            file_path: 保存先パス
        """
        output_path = Path(file_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        data: Dict[str, Any] = self.to_dict()
        if not self.report_file:
            del data["report_file"]
        if not self.log_file:
            del data["log_file"]

        with open(file_path, "w", encoding="utf-8") as f:
            yaml.dump(
                data,
                f,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False
            )

        logger.info(f"Configuration saved to {file_path}")
