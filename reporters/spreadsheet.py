"""
Excel workbook export of a revision comparison.

Two worksheets:
- "Details": the summary counts
- "Table of Changes": one row per changed field, added rows green, deleted
  rows red, changed cells yellow showing the current value with the old
  value in gray underneath
"""
import io
import logging

from openpyxl import Workbook
from openpyxl.cell.rich_text import CellRichText, TextBlock
from openpyxl.cell.text import InlineFont
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from config import settings
from core import ComparisonResult
from reporters.base import row_cells, row_color, SUMMARY_LABELS

logger = logging.getLogger(__name__)

DETAILS_SHEET = "Details"
CHANGES_SHEET = "Table of Changes"


def _solid_fill(color: str) -> PatternFill:
    return PatternFill(fill_type="solid", start_color=color, end_color=color)


def _write_details(ws: Worksheet, result: ComparisonResult):
    ws.title = DETAILS_SHEET
    for col_idx, (key, label) in enumerate(SUMMARY_LABELS, start=1):
        header = ws.cell(row=1, column=col_idx, value=label)
        header.font = Font(bold=True)
        ws.cell(row=2, column=col_idx, value=getattr(result.summary, key))
        ws.column_dimensions[get_column_letter(col_idx)].width = len(label) + 2


def _write_changes(ws: Worksheet, result: ComparisonResult):
    headers = result.change_set.headers
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    width = len(headers)
    old_font = InlineFont(color=settings.OLD_VALUE_COLOR)

    for row_idx, entry in enumerate(result.change_set, start=2):
        cells = row_cells(entry)
        color = row_color(entry)
        if color:
            for col_idx in range(1, max(width, len(cells)) + 1):
                ws.cell(row=row_idx, column=col_idx).fill = _solid_fill(color)

        for col_idx, cell in enumerate(cells, start=1):
            target = ws.cell(row=row_idx, column=col_idx)
            if cell.changed:
                target.value = CellRichText([cell.value + "\n", TextBlock(old_font, cell.old_value)])
                target.fill = _solid_fill(settings.CHANGED_COLOR)
                target.alignment = Alignment(wrap_text=True, vertical="top")
            else:
                target.value = cell.value

    ws.freeze_panes = "A2"


def autosize_columns(ws: Worksheet, max_width: int = 60) -> None:
    for col_idx, col_cells in enumerate(ws.columns, start=1):
        max_len = 0
        for c in col_cells:
            if c.value is None:
                continue
            longest_line = max(len(line) for line in str(c.value).split("\n"))
            max_len = max(max_len, longest_line)
        ws.column_dimensions[get_column_letter(col_idx)].width = min(max_len + 2, max_width)


def generate_workbook(result: ComparisonResult) -> Workbook:
    wb = Workbook()
    _write_details(wb.active, result)

    ws = wb.create_sheet(CHANGES_SHEET)
    _write_changes(ws, result)
    autosize_columns(ws)
    return wb


def generate_xlsx(result: ComparisonResult) -> io.BytesIO:
    """Build the comparison workbook and return it as an in-memory file."""
    buffer = io.BytesIO()
    generate_workbook(result).save(buffer)
    buffer.seek(0)
    logger.debug(f"Generated workbook with {len(result.change_set)} changed fields")
    return buffer
