"""
Attribute value helpers for the data dictionary comparison.

Values are compared and displayed with markup removed, and attributes of two
records for the same field are lined up by position rather than by name.
"""
import re
from typing import Any, Iterator, Mapping, Optional

_COMMENT_RE = re.compile(r"<!--.*?(-->|$)", re.DOTALL)
# Quoted attribute values may contain '>'
_TAG_RE = re.compile(r"""<(?![\s<])(?:"[^"]*(?:"|$)|'[^']*(?:'|$)|[^'">])*(?:>|$)""")


def strip_tags(value: Any) -> str:
    """
    Remove HTML/XML markup from an attribute value.

    None becomes an empty string. A '<' followed by whitespace is kept as
    text ("Age < 18"); an unterminated tag swallows the rest of the string.
    """
    if value is None:
        return ""
    text = str(value)
    if "<" not in text:
        return text
    text = _COMMENT_RE.sub("", text)
    return _TAG_RE.sub("", text)


def is_missing(value: Optional[str]) -> bool:
    """An attribute has no value when it is None or empty."""
    return value is None or value == ""


def display_value(value: Optional[str], placeholder: str) -> str:
    return placeholder if is_missing(value) else value


def align_attributes(
    new_record: Optional[Mapping[str, Optional[str]]],
    old_record: Optional[Mapping[str, Optional[str]]],
) -> Iterator[tuple[str, Optional[str], Optional[str]]]:
    """
    Pair the attributes of two records by position.

    Slot i of the newer record is compared with slot i of the older one,
    whatever the attribute names are. The attribute name comes from the
    newer record; trailing slots that only exist in the older record keep
    the older name. The side without a slot yields None.
    """
    new_items = list(new_record.items()) if new_record else []
    old_items = list(old_record.items()) if old_record else []

    for idx in range(max(len(new_items), len(old_items))):
        if idx < len(new_items):
            name, new_value = new_items[idx]
        else:
            name, new_value = old_items[idx][0], None
        old_value = old_items[idx][1] if idx < len(old_items) else None
        yield name, new_value, old_value


def attribute_headers(dictionary: Mapping[str, Mapping[str, Optional[str]]]) -> list[str]:
    """Attribute schema of a dictionary, taken from its first record."""
    for record in dictionary.values():
        return list(record.keys())
    return []
