"""
CSV export of a revision comparison.

Columns are the attribute headers followed by three detail columns: the
change type label, the names of the changed attributes and their previous
values. Detail lists are newline-joined inside one cell and only filled for
modified fields. Missing values are written as empty strings.
"""
import csv
import io

from config import settings
from core import ComparisonResult, ChangeStatus
from reporters.base import row_cells

DETAIL_HEADERS = ["Change Type", "Changed Attributes", "Previous Values"]


def csv_rows(result: ComparisonResult) -> list[list[str]]:
    """Header row plus one row per change entry."""
    missing = settings.CSV_MISSING_VALUE
    rows = [list(result.change_set.headers) + DETAIL_HEADERS]

    for entry in result.change_set:
        values = [cell.value for cell in row_cells(entry, missing=missing, changed_missing=missing)]

        changed_names = ""
        previous_values = ""
        if entry.status == ChangeStatus.MODIFIED:
            changed = entry.changed_attributes
            changed_names = "\n".join(a.name for a in changed)
            previous_values = "\n".join(f"{a.name}: {a.old_value or missing}" for a in changed)

        rows.append(values + [entry.status.label, changed_names, previous_values])

    return rows


def generate_csv(result: ComparisonResult) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerows(csv_rows(result))
    return buffer.getvalue()
