# Data Dictionary Revisions v1.0.0
"""
Core package for Data Dictionary Revisions.
Contains the comparison engine and data dictionary parsing utilities.
"""
from core.comparison import (
    compare_dictionaries,
    RecordSetDiffer,
    AttributeChange,
    ChangeEntry,
    ChangeSet,
    ChangeStatus,
    ComparisonResult,
    Summary,
    Dictionary,
    FieldRecord,
    CURRENT_REVISION
)
from core.markup import (
    strip_tags,
    align_attributes,
    attribute_headers,
    display_value,
    is_missing
)
from core.dictionary_parser import (
    parse_dictionary_file,
    parse_dictionary_content,
    parse_csv_content,
    parse_json_content,
    ParsedDictionary
)

__all__ = [
    "compare_dictionaries",
    "RecordSetDiffer",
    "AttributeChange",
    "ChangeEntry",
    "ChangeSet",
    "ChangeStatus",
    "ComparisonResult",
    "Summary",
    "Dictionary",
    "FieldRecord",
    "CURRENT_REVISION",
    "strip_tags",
    "align_attributes",
    "attribute_headers",
    "display_value",
    "is_missing",
    "parse_dictionary_file",
    "parse_dictionary_content",
    "parse_csv_content",
    "parse_json_content",
    "ParsedDictionary"
]
