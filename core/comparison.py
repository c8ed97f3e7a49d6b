"""
Data Dictionary Comparison Engine

Computes the classified difference between two revisions of a project's data
dictionary: fields added, deleted and modified, with per-attribute old/new
values, plus the summary counts shown alongside the table of changes.

Two equality tests are used on purpose:
- a field is included as modified when its raw record differs in any way
  (values or attribute order)
- it is only counted as modified when at least one attribute still differs
  after markup is stripped from both sides
"""
from typing import Callable, Mapping, Optional
from dataclasses import dataclass
from enum import Enum

from core.markup import strip_tags, align_attributes, attribute_headers

FieldRecord = Mapping[str, Optional[str]]
Dictionary = Mapping[str, FieldRecord]
Normalizer = Callable[[Optional[str]], str]

CURRENT_REVISION = "current"


class ChangeStatus(str, Enum):
    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"

    @property
    def label(self) -> str:
        """Row label used by the CSV export."""
        return {
            ChangeStatus.ADDED: "New field",
            ChangeStatus.DELETED: "Deleted field",
            ChangeStatus.MODIFIED: "Field with changes",
        }[self]


@dataclass(frozen=True)
class AttributeChange:
    """One attribute slot of a changed field, values already normalized."""
    name: str
    new_value: Optional[str] = None
    old_value: Optional[str] = None
    changed: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "new_value": self.new_value,
            "old_value": self.old_value,
            "changed": self.changed,
        }


@dataclass(frozen=True)
class ChangeEntry:
    """Diff result for a single field name."""
    field_name: str
    status: ChangeStatus
    new_record: Optional[FieldRecord] = None
    old_record: Optional[FieldRecord] = None
    attributes: tuple[AttributeChange, ...] = ()

    @property
    def record(self) -> FieldRecord:
        """The record shown for this row: the old one for deleted fields."""
        if self.status == ChangeStatus.DELETED:
            return self.old_record
        return self.new_record

    @property
    def changed_attributes(self) -> list[AttributeChange]:
        return [a for a in self.attributes if a.changed]

    @property
    def has_changes(self) -> bool:
        return any(a.changed for a in self.attributes)

    def to_dict(self) -> dict:
        return {
            "field_name": self.field_name,
            "status": self.status.value,
            "attributes": [a.to_dict() for a in self.attributes],
        }


@dataclass(frozen=True)
class Summary:
    fields_added: int = 0
    fields_deleted: int = 0
    fields_modified: int = 0
    total_fields_before: int = 0
    total_fields_after: int = 0

    def to_dict(self) -> dict:
        return {
            "fields_added": self.fields_added,
            "fields_deleted": self.fields_deleted,
            "fields_modified": self.fields_modified,
            "total_fields_before": self.total_fields_before,
            "total_fields_after": self.total_fields_after,
        }


@dataclass(frozen=True)
class ChangeSet:
    """Ordered change entries plus the attribute schema used to render them."""
    entries: tuple[ChangeEntry, ...] = ()
    headers: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def by_status(self, status: ChangeStatus) -> list[ChangeEntry]:
        return [e for e in self.entries if e.status == status]

    def to_dict(self) -> dict:
        return {
            "headers": list(self.headers),
            "entries": [e.to_dict() for e in self.entries],
        }


@dataclass(frozen=True)
class ComparisonResult:
    """A change set with its summary, for a pair of revisions."""
    change_set: ChangeSet
    summary: Summary
    newer_revision: Optional[str] = None
    older_revision: Optional[str] = None

    @property
    def is_identical(self) -> bool:
        return self.change_set.is_empty

    def to_dict(self) -> dict:
        return {
            "newer_revision": self.newer_revision,
            "older_revision": self.older_revision,
            "is_identical": self.is_identical,
            "summary": self.summary.to_dict(),
            **self.change_set.to_dict(),
        }


def _records_equal(new_record: FieldRecord, old_record: FieldRecord) -> bool:
    """Strict comparison: same attribute names, values and order."""
    return list(new_record.items()) == list(old_record.items())


class RecordSetDiffer:
    """
    Compares two dictionaries (newer, older) and classifies their fields.

    ``normalize`` is applied to attribute values before the per-attribute
    comparison and to the values carried for display. It is never applied to
    the strict test deciding whether a field appears in the change set.
    """

    def __init__(self, normalize: Normalizer = strip_tags):
        self.normalize = normalize

    def diff(self, newer: Dictionary, older: Dictionary) -> ChangeSet:
        entries: list[ChangeEntry] = []

        for field_name, new_record in newer.items():
            if field_name not in older:
                entries.append(self._single_sided(field_name, ChangeStatus.ADDED, new_record))
            elif not _records_equal(new_record, older[field_name]):
                old_record = older[field_name]
                entries.append(ChangeEntry(
                    field_name=field_name,
                    status=ChangeStatus.MODIFIED,
                    new_record=new_record,
                    old_record=old_record,
                    attributes=self.compare_attributes(new_record, old_record),
                ))

        for field_name, old_record in older.items():
            if field_name not in newer:
                entries.append(self._single_sided(field_name, ChangeStatus.DELETED, old_record))

        headers = attribute_headers(newer) or attribute_headers(older)
        return ChangeSet(entries=tuple(entries), headers=tuple(_extend_headers(headers, entries)))

    def compare_attributes(
        self, new_record: FieldRecord, old_record: FieldRecord
    ) -> tuple[AttributeChange, ...]:
        """Positional, normalized comparison of two records of the same field."""
        attributes = []
        for name, new_value, old_value in align_attributes(new_record, old_record):
            new_norm = self.normalize(new_value)
            old_norm = self.normalize(old_value)
            attributes.append(AttributeChange(
                name=name,
                new_value=new_norm,
                old_value=old_norm,
                changed=new_norm != old_norm,
            ))
        return tuple(attributes)

    def summarize(self, change_set: ChangeSet, older: Dictionary, newer: Dictionary) -> Summary:
        return Summary(
            fields_added=len(change_set.by_status(ChangeStatus.ADDED)),
            fields_deleted=len(change_set.by_status(ChangeStatus.DELETED)),
            fields_modified=sum(
                1 for e in change_set.by_status(ChangeStatus.MODIFIED) if e.has_changes
            ),
            total_fields_before=len(older),
            total_fields_after=len(newer),
        )

    def _single_sided(self, field_name: str, status: ChangeStatus, record: FieldRecord) -> ChangeEntry:
        attributes = tuple(
            AttributeChange(
                name=name,
                new_value=self.normalize(value) if status == ChangeStatus.ADDED else None,
                old_value=self.normalize(value) if status == ChangeStatus.DELETED else None,
            )
            for name, value in record.items()
        )
        if status == ChangeStatus.ADDED:
            return ChangeEntry(field_name, status, new_record=record, attributes=attributes)
        return ChangeEntry(field_name, status, old_record=record, attributes=attributes)


def _extend_headers(headers: list[str], entries: list[ChangeEntry]) -> list[str]:
    """Append names of trailing attribute slots wider than the header row."""
    headers = list(headers)
    for entry in entries:
        for attribute in entry.attributes[len(headers):]:
            headers.append(attribute.name)
    return headers


def compare_dictionaries(
    newer: Dictionary,
    older: Dictionary,
    normalize: Normalizer = strip_tags,
    newer_revision: Optional[str] = None,
    older_revision: Optional[str] = None,
) -> ComparisonResult:
    """
    Main entry point for comparing two data dictionary revisions.

    Args:
        newer: The dictionary of the later revision
        older: The dictionary of the earlier revision
        normalize: Value normalization for the per-attribute comparison

    Returns:
        ComparisonResult with the change set and its summary
    """
    differ = RecordSetDiffer(normalize)
    change_set = differ.diff(newer, older)
    return ComparisonResult(
        change_set=change_set,
        summary=differ.summarize(change_set, older, newer),
        newer_revision=newer_revision,
        older_revision=older_revision,
    )
