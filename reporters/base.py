"""
Shared table layout for the comparison reporters.

Every reporter renders the same table: one row per change entry, one cell
per attribute slot, the newer dictionary's attribute schema as the header
row. This module turns entries into display cells so the reporters only
deal with formatting.
"""
from dataclasses import dataclass
from typing import Optional

from config import settings
from core import ChangeEntry, ChangeStatus, display_value


@dataclass
class Cell:
    """A rendered table cell. ``old_value`` is only set for changed cells."""
    value: str
    old_value: Optional[str] = None
    changed: bool = False


def row_cells(
    entry: ChangeEntry,
    missing: Optional[str] = None,
    changed_missing: Optional[str] = None
) -> list[Cell]:
    """
    Display cells for one change entry.

    Args:
        entry: The change entry
        missing: Placeholder for empty values (defaults to settings.MISSING_VALUE)
        changed_missing: Placeholder for an empty side of a changed cell
            (defaults to settings.CHANGED_MISSING_VALUE)
    """
    missing = settings.MISSING_VALUE if missing is None else missing
    changed_missing = settings.CHANGED_MISSING_VALUE if changed_missing is None else changed_missing

    cells = []
    for attribute in entry.attributes:
        if entry.status == ChangeStatus.ADDED:
            cells.append(Cell(display_value(attribute.new_value, missing)))
        elif entry.status == ChangeStatus.DELETED:
            cells.append(Cell(display_value(attribute.old_value, missing)))
        elif attribute.changed:
            cells.append(Cell(
                value=display_value(attribute.new_value, changed_missing),
                old_value=display_value(attribute.old_value, changed_missing),
                changed=True
            ))
        else:
            cells.append(Cell(display_value(attribute.new_value, missing)))
    return cells


def row_color(entry: ChangeEntry) -> Optional[str]:
    """Row tint for added and deleted fields, None for modified ones."""
    if entry.status == ChangeStatus.ADDED:
        return settings.ADDED_COLOR
    if entry.status == ChangeStatus.DELETED:
        return settings.DELETED_COLOR
    return None


SUMMARY_LABELS = [
    ("fields_added", "Fields added"),
    ("fields_deleted", "Fields deleted"),
    ("fields_modified", "Fields modified"),
    ("total_fields_before", "Total fields BEFORE changes"),
    ("total_fields_after", "Total fields AFTER changes"),
]
