"""two-var宣言スタイルチェッカーのメインエントリーポイント。"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional
from dataclasses import dataclass
import logging

from .config import Config
from .analyzer.js_parser import JsParser, JsParseError
from .analyzer.traversal import walk
from .rule.two_var_rule import TwoVarRule
from .models.violation import Violation
from .io.excel_writer import ExcelWriter
from .utils.logger import setup_logging, ProgressLogger

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_VIOLATIONS = 2


@dataclass
class ProcessingStats:
    """処理統計情報。"""
    files: int = 0
    clean: int = 0
    with_violations: int = 0
    violations: int = 0
    errors: int = 0


class TwoVarLinter:
    """ファイル単位でtwo-varルールを実行するクラス。"""

    def __init__(self, config: Config):
        """リンターを初期化する。

        Args:
            config: アプリケーション設定
        """
        self.config = config
        self.stats = ProcessingStats()
        self.parser = JsParser(source_type=config.source_type)

    def _new_rule(self, file_path: str) -> TwoVarRule:
        # スコープ状態はファイルごとに独立させる
        return TwoVarRule(
            mode_option=self.config.rule_options,
            grouping_option=self.config.grouping,
            file_path=file_path
        )

    def lint_tree(self, tree, file_path: str = "<input>") -> List[Violation]:
        """構文木をチェックする。

        Args:
            tree: ESTreeのProgramノード
            file_path: 違反の位置情報に使うファイルパス

        Returns:
            違反のリスト
        """
        rule = self._new_rule(file_path)
        walk(tree, rule.handlers())
        return rule.violations

    def lint_source(self, source_code: str, file_path: str = "<input>") -> List[Violation]:
        """ソース文字列をチェックする。

        Raises:
            JsParseError: パースに失敗した場合
        """
        tree = self.parser.parse_string(source_code, filename=file_path)
        return self.lint_tree(tree, file_path)

    def lint_file(self, file_path: str) -> List[Violation]:
        """ファイルをチェックする。

        Raises:
            JsParseError: 読み込みまたはパースに失敗した場合
        """
        tree = self.parser.parse_file(file_path)
        return self.lint_tree(tree, file_path)

    def process(self, source_files: List[str]) -> List[Violation]:
        """全ファイルをチェックする。

        パースやチェックに失敗したファイルはエラーとして数え、処理を継続する。

        Args:
            source_files: チェックするファイルのリスト

        Returns:
            全ファイルの違反のリスト
        """
        logger.info(f"Linting {len(source_files)} files")

        violations: List[Violation] = []
        progress = ProgressLogger(len(source_files), logger)

        for file_path in source_files:
            self.stats.files += 1
            try:
                file_violations = self.lint_file(file_path)
            except JsParseError as e:
                logger.error(f"{e} (line {e.line})" if e.line else str(e))
                self.stats.errors += 1
                progress.update(file_path)
                continue
            except Exception as e:
                logger.exception(f"Failed to lint {file_path}: {e}")
                self.stats.errors += 1
                progress.update(file_path)
                continue

            if file_violations:
                self.stats.with_violations += 1
                self.stats.violations += len(file_violations)
                violations.extend(file_violations)
            else:
                self.stats.clean += 1

            progress.update(file_path)

        progress.complete()
        # 処理済みの構文木を解放する
        self.parser.clear_cache()
        self._log_statistics()
        return violations

    def _log_statistics(self) -> None:
        """処理統計をログ出力する。"""
        logger.info("=" * 50)
        logger.info("Lint Statistics:")
        logger.info(f"  Files checked: {self.stats.files}")
        logger.info(f"  Clean files: {self.stats.clean}")
        logger.info(f"  Files with violations: {self.stats.with_violations}")
        logger.info(f"  Violations: {self.stats.violations}")
        logger.info(f"  Errors: {self.stats.errors}")
        logger.info("=" * 50)


def build_arg_parser() -> argparse.ArgumentParser:
    """コマンドライン引数パーサーを構築する。"""
    parser = argparse.ArgumentParser(
        prog="two-var",
        description="var / let / const 宣言文とrequire()のスタイルチェッカー"
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="チェックするファイルまたはディレクトリ（省略時は設定のsource_directories）"
    )
    parser.add_argument(
        "-c", "--config",
        help="設定ファイルパス"
    )
    parser.add_argument(
        "--mode",
        choices=["always", "never"],
        help="全種別に適用するモード（設定ファイルのrule_optionsを上書き）"
    )
    parser.add_argument(
        "--grouping",
        action="store_true",
        help="require()の出所の混在をチェックする"
    )
    parser.add_argument(
        "--module",
        action="store_true",
        help="ESモジュールとしてパースする"
    )
    parser.add_argument(
        "-o", "--output",
        help="Excelレポートの出力先"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="詳細ログを有効にする"
    )
    parser.add_argument(
        "--init-config",
        metavar="PATH",
        help="デフォルト設定ファイルを生成する"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """メインエントリーポイント。

    Returns:
        終了コード（0: 違反なし, 1: エラー, 2: 違反あり）
    """
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.init_config:
        return _init_config(args.init_config)

    # 設定を読み込み
    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: 設定ファイルが見つかりません: {args.config}", file=sys.stderr)
            return EXIT_ERROR
        config = Config.from_yaml(str(config_path))
    else:
        config = Config()

    # コマンドライン指定で上書き
    if args.mode:
        config.rule_options = args.mode
    if args.grouping:
        config.grouping = True
    if args.module:
        config.source_type = "module"
    if args.output:
        config.report_file = args.output
    if args.verbose:
        config.log_level = "DEBUG"

    setup_logging(level=config.log_level, log_file=config.log_file)

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(f"Configuration error: {error}")
        return EXIT_ERROR

    if not args.paths and not config.source_directories:
        logger.error("No paths given and no source_directories configured")
        return EXIT_ERROR

    source_files = config.get_source_files(args.paths or None)
    if not source_files:
        logger.error("No source files found")
        return EXIT_ERROR

    linter = TwoVarLinter(config)
    violations = linter.process(source_files)

    for violation in violations:
        print(violation)

    if config.report_file:
        writer = ExcelWriter(config.report_file)
        writer.write_violations(violations)
        writer.write_summary(violations, linter.stats.files)

    if linter.stats.errors:
        return EXIT_ERROR
    return EXIT_VIOLATIONS if violations else EXIT_OK


def _init_config(output_config: str) -> int:
    """デフォルト設定ファイルを生成する。

    Args:
        output_config: 出力設定ファイルパス

    Returns:
        終了コード
    """
    setup_logging(level="INFO")

    if Path(output_config).exists():
        print(f"Error: ファイルが既に存在します: {output_config}", file=sys.stderr)
        return EXIT_ERROR

    config = Config(source_directories=["."])
    config.save_yaml(output_config)
    print(f"設定ファイルを生成しました: {output_config}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
