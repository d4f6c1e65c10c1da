"""esprimaを使用したJavaScriptソースコード解析のラッパー。"""

from typing import Dict, Optional
from pathlib import Path
import os
import logging
import threading

import esprima
from esprima.error_handler import Error as EsprimaError

logger = logging.getLogger(__name__)


class JsParseError(Exception):
    """JavaScriptパース時のエラー。"""

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.line = line


class JsParser:
    """esprimaを使用したJavaScript解析のメインクラス。

    esprimaをラップしてESTree形式の構文木を提供する。
    同じファイルの再パースを避けるためにキャッシュを持つ。
    """

    SOURCE_TYPES = ("script", "module")

    def __init__(self, source_type: str = "script", tolerant: bool = False):
        """JSパーサーを初期化する。

        Args:
            source_type: "script" または "module"
            tolerant: 軽微な構文エラーを許容するかどうか
        """
        if source_type not in self.SOURCE_TYPES:
            raise ValueError(f"Unsupported source type: {source_type}")

        self.source_type = source_type
        self.tolerant = tolerant

        # スレッドセーフな構文木キャッシュ
        self._trees: Dict[str, object] = {}
        self._cache_lock = threading.Lock()

        logger.debug(f"JsParser initialized (source_type={source_type})")

    def _build_options(self) -> dict:
        """esprimaのパースオプションを構築する。"""
        return {
            "loc": True,
            "range": True,
            "tolerant": self.tolerant,
        }

    def parse_string(self, source_code: str, filename: str = "<string>"):
        """文字列からJavaScriptソースコードをパースする。

        Args:
            source_code: JavaScriptソースコード
            filename: エラーメッセージ用の仮想ファイル名

        Returns:
            ESTreeのProgramノード

        Raises:
            JsParseError: パースに失敗した場合
        """
        options = self._build_options()

        try:
            if self.source_type == "module":
                return esprima.parseModule(source_code, options)
            return esprima.parseScript(source_code, options)
        except EsprimaError as e:
            line = getattr(e, "lineNumber", None)
            description = getattr(e, "description", None) or str(e)
            raise JsParseError(f"Failed to parse {filename}: {description}", line=line) from e

    def parse_file(self, file_path: str, force_reparse: bool = False):
        """ファイルの構文木を取得する。

        Args:
            file_path: ソースファイルのパス
            force_reparse: キャッシュがあっても強制的に再パース

        Returns:
            ESTreeのProgramノード

        Raises:
            JsParseError: 読み込みまたはパースに失敗した場合
        """
        abs_path = os.path.abspath(file_path)

        with self._cache_lock:
            if not force_reparse and abs_path in self._trees:
                return self._trees[abs_path]

        try:
            source_code = Path(abs_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise JsParseError(f"Failed to read {abs_path}: {e}") from e

        # 先頭のshebang行はesprimaが扱えないためコメント化する
        if source_code.startswith("#!"):
            source_code = "//" + source_code[2:]

        tree = self.parse_string(source_code, filename=abs_path)

        with self._cache_lock:
            self._trees[abs_path] = tree

        return tree

    def clear_cache(self) -> None:
        """構文木キャッシュをクリアする。"""
        with self._cache_lock:
            self._trees.clear()
        logger.debug("Syntax tree cache cleared")
