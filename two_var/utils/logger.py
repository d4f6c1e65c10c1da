"""ロギング設定モジュール。"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """ロギング設定をセットアップする。

    違反の出力は標準出力に書くため、ログはデフォルトで標準エラーに出す。

    Args:
        level: ログレベル（DEBUG, INFO, WARNING, ERROR, CRITICAL）
        log_file: ログファイルへのパス（省略可）
        format_string: カスタムフォーマット文字列（省略可）
        stream: コンソールハンドラーの出力先（省略時は標準エラー）

    Returns:
        ルートロガー
    """
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    # レベル文字列をロギングレベルに変換
    log_level = getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # 既存のハンドラーを削除
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    return root_logger


class ProgressLogger:
    """ファイル単位の進捗ログ出力用のヘルパークラス。"""

    def __init__(
        self,
        total: int,
        logger: Optional[logging.Logger] = None,
        log_interval: int = 25
    ):
        """進捗ロガーを初期化する。

        Args:
            total: ファイルの総数
            logger: 使用するロガー
            log_interval: 進捗更新の間隔
        """
        self.total = total
        self.current = 0
        self.logger = logger or logging.getLogger(__name__)
        self.log_interval = max(1, log_interval)

    def update(self, message: Optional[str] = None) -> None:
        """進捗を1件進める。

        Args:
            message: 含めるメッセージ（省略可）
        """
        self.current += 1
        if self.total <= 0:
            return

        if self.current % self.log_interval == 0 or self.current == self.total:
            progress = self.current / self.total * 100
            msg = f"Checked {self.current}/{self.total} files ({progress:.1f}%)"
            if message:
                msg += f" - {message}"
            self.logger.info(msg)

    def complete(self, message: str = "Lint complete") -> None:
        """進捗を完了としてマークする。"""
        self.logger.info(f"{message}: {self.total} files processed")
