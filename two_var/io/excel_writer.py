"""違反レポートのExcel出力モジュール。"""

from typing import Dict, List
from pathlib import Path
from datetime import datetime
import logging

from openpyxl import Workbook, load_workbook
from openpyxl.styles import PatternFill, Font, Alignment, Border, Side

from ..models.violation import Violation, ViolationCategory

logger = logging.getLogger(__name__)


class ExcelWriter:
    """ルール違反をExcelファイルに書き込む。"""

    # 各違反種別の色（RGB hex、#なし）
    CATEGORY_COLORS: Dict[ViolationCategory, str] = {
        ViolationCategory.COMBINE: "FFEB9C",   # 黄
        ViolationCategory.SPLIT: "BDD7EE",     # 青
        ViolationCategory.MIXED: "FFC7CE",     # 赤
        ViolationCategory.GROUPING: "E4DFEC",  # 紫
    }

    VIOLATION_HEADERS = ["File", "Line", "Column", "Category", "Message", "Rule"]
    VIOLATION_WIDTHS = [50, 8, 8, 12, 70, 10]

    VIOLATIONS_SHEET = "Violations"
    SUMMARY_SHEET = "Summary"

    def __init__(self, output_file: str):
        """Excelライターを初期化する。

        Args:
            output_file: 出力Excelファイルのパス
        """
        self.output_file = Path(output_file)

    @staticmethod
    def _thin_border() -> Border:
        return Border(
            left=Side(style="thin"),
            right=Side(style="thin"),
            top=Side(style="thin"),
            bottom=Side(style="thin")
        )

    def _fill_for(self, category: ViolationCategory) -> PatternFill:
        color = self.CATEGORY_COLORS[category]
        return PatternFill(start_color=color, end_color=color, fill_type="solid")

    def write_violations(self, violations: List[Violation]) -> None:
        """違反一覧シートを含むワークブックを作成する。

        Args:
            violations: 書き込む違反のリスト
        """
        self.output_file.parent.mkdir(parents=True, exist_ok=True)

        wb = Workbook()
        ws = wb.active
        ws.title = self.VIOLATIONS_SHEET

        self._add_headers(ws)

        for row_num, violation in enumerate(violations, 2):
            self._write_violation_row(ws, row_num, violation)

        for i, width in enumerate(self.VIOLATION_WIDTHS, 1):
            col_letter = ws.cell(row=1, column=i).column_letter
            ws.column_dimensions[col_letter].width = width

        ws.freeze_panes = "A2"

        wb.save(self.output_file)
        logger.info(f"{len(violations)} violations written to {self.output_file}")

    def _add_headers(self, ws) -> None:
        """ヘッダー行を追加する。

        Args:
            ws: ワークシートオブジェクト
        """
        header_alignment = Alignment(horizontal="center", vertical="center")
        header_fill = PatternFill(
            start_color="4472C4",
            end_color="4472C4",
            fill_type="solid"
        )
        white_font = Font(bold=True, color="FFFFFF")
        thin_border = self._thin_border()

        for i, header in enumerate(self.VIOLATION_HEADERS, 1):
            cell = ws.cell(row=1, column=i)
            cell.value = header
            cell.font = white_font
            cell.alignment = header_alignment
            cell.fill = header_fill
            cell.border = thin_border

    def _write_violation_row(self, ws, row_num: int, violation: Violation) -> None:
        """1行分の違反を書き込む。

        Args:
            ws: ワークシートオブジェクト
            row_num: 書き込む行番号
            violation: 書き込む違反
        """
        thin_border = self._thin_border()
        row = violation.to_dict()
        values = [row[key] for key in ("file", "line", "column", "category", "message", "rule")]

        for col, value in enumerate(values, 1):
            cell = ws.cell(row=row_num, column=col)
            cell.value = value
            cell.border = thin_border

        category_cell = ws.cell(row=row_num, column=4)
        category_cell.fill = self._fill_for(violation.category)
        category_cell.alignment = Alignment(horizontal="center")

        ws.cell(row=row_num, column=5).alignment = Alignment(wrap_text=True, vertical="top")

    def write_summary(self, violations: List[Violation], files_checked: int) -> None:
        """統計情報を含むサマリーシートを追加する。

        write_violations()の後に呼び出す。

        Args:
            violations: 全違反のリスト
            files_checked: チェックしたファイル数
        """
        wb = load_workbook(self.output_file)

        # 既存のSummaryシートがあれば削除
        if self.SUMMARY_SHEET in wb.sheetnames:
            del wb[self.SUMMARY_SHEET]

        ws = wb.create_sheet(self.SUMMARY_SHEET)

        total = len(violations)
        counts: Dict[ViolationCategory, int] = {category: 0 for category in ViolationCategory}
        for violation in violations:
            counts[violation.category] += 1

        ws["A1"] = "two-var violation summary"
        ws["A1"].font = Font(bold=True, size=14)
        ws.merge_cells("A1:C1")

        ws["A2"] = f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
        ws.merge_cells("A2:C2")

        ws["A3"] = f"Files checked: {files_checked}"
        ws.merge_cells("A3:C3")

        headers = ["Category", "Count", "Ratio"]
        header_font = Font(bold=True)
        thin_border = self._thin_border()

        for i, header in enumerate(headers, 1):
            cell = ws.cell(row=5, column=i)
            cell.value = header
            cell.font = header_font
            cell.border = thin_border
            cell.alignment = Alignment(horizontal="center")

        row = 6
        for category, count in counts.items():
            cell_type = ws.cell(row=row, column=1)
            cell_type.value = category.value
            cell_type.fill = self._fill_for(category)
            cell_type.border = thin_border

            cell_count = ws.cell(row=row, column=2)
            cell_count.value = count
            cell_count.alignment = Alignment(horizontal="right")
            cell_count.border = thin_border

            cell_pct = ws.cell(row=row, column=3)
            cell_pct.value = f"{count / total * 100:.1f}%" if total > 0 else "0%"
            cell_pct.alignment = Alignment(horizontal="right")
            cell_pct.border = thin_border

            row += 1

        # 合計行
        for col, value in enumerate(["Total", total, "100%" if total > 0 else "0%"], 1):
            cell = ws.cell(row=row, column=col)
            cell.value = value
            cell.font = Font(bold=True)
            cell.border = thin_border
            if col > 1:
                cell.alignment = Alignment(horizontal="right")

        ws.column_dimensions["A"].width = 15
        ws.column_dimensions["B"].width = 10
        ws.column_dimensions["C"].width = 10

        wb.save(self.output_file)
        logger.info(f"Summary sheet added to {self.output_file}")
