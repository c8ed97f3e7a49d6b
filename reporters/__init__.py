# Data Dictionary Revisions v1.0.0
"""
Reporters package for Data Dictionary Revisions.

Output formats for a revision comparison:
- HTML: details, colour key and table of changes, plus the revision history page
- Excel: "Details" and "Table of Changes" worksheets
- CSV: table of changes with change detail columns
- PDF: printable comparison report
"""
from reporters.base import Cell, row_cells, row_color, SUMMARY_LABELS
from reporters.html import (
    render_summary,
    render_key,
    render_changes_table,
    render_comparison,
    render_revision_history,
    render_revisions_page
)
from reporters.spreadsheet import generate_workbook, generate_xlsx
from reporters.csv_export import csv_rows, generate_csv, DETAIL_HEADERS
from reporters.pdf import generate_pdf

__all__ = [
    "Cell",
    "row_cells",
    "row_color",
    "SUMMARY_LABELS",
    "render_summary",
    "render_key",
    "render_changes_table",
    "render_comparison",
    "render_revision_history",
    "render_revisions_page",
    "generate_workbook",
    "generate_xlsx",
    "csv_rows",
    "generate_csv",
    "DETAIL_HEADERS",
    "generate_pdf"
]
