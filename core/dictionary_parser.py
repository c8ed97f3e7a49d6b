"""
Data dictionary file parsing.

A data dictionary file is either:
- CSV, one row per field, the first column holding the field name and the
  header row naming the attributes (the layout of a data dictionary download)
- JSON, a list of records each carrying a "field_name" key, or an object
  mapping field names to their records

Field and attribute order from the file is preserved.
"""
import csv
import io
import json
import logging
from pathlib import Path
from typing import Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)

FIELD_NAME_KEY = "field_name"


@dataclass
class ParsedDictionary:
    """Result of parsing a data dictionary file."""
    fields: dict
    filename: str
    file_path: Optional[str] = None

    @property
    def field_count(self) -> int:
        return len(self.fields)


def _cell(value) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def parse_csv_content(content: str) -> dict:
    """
    Parse data dictionary CSV text.

    Rows with an empty field name are skipped. Short rows are padded with
    empty values so every record carries the full header schema; values
    past the last header are dropped.

    Raises:
        ValueError: for unreadable CSV or repeated header names
    """
    reader = csv.reader(io.StringIO(content))
    try:
        try:
            headers = next(reader)
        except StopIteration:
            return {}

        if headers and headers[0].startswith("\ufeff"):
            headers[0] = headers[0][1:]

        duplicates = sorted({h for h in headers if headers.count(h) > 1})
        if duplicates:
            raise ValueError(f"Duplicate attribute names in header: {', '.join(duplicates)}")

        dictionary = {}
        for row in reader:
            if not row or not row[0].strip():
                continue
            field_name = row[0].strip()
            if len(row) > len(headers):
                logger.warning(
                    f"Field '{field_name}' has {len(row) - len(headers)} value(s) past the last header, ignoring them"
                )
            row = row + [""] * (len(headers) - len(row))
            if field_name in dictionary:
                logger.warning(f"Duplicate field '{field_name}' in data dictionary, keeping last row")
            dictionary[field_name] = {header: row[i] for i, header in enumerate(headers)}
    except csv.Error as e:
        raise ValueError(f"Invalid CSV: {e}")

    return dictionary


def parse_json_content(content: str) -> dict:
    """
    Parse data dictionary JSON text.

    Raises:
        ValueError: if the JSON is neither a list of records nor an object of records
    """
    data = json.loads(content)

    if isinstance(data, dict):
        if not all(isinstance(record, dict) for record in data.values()):
            raise ValueError("Every field must map to an object of attributes")
        return {
            str(name): {key: _cell(value) for key, value in record.items()}
            for name, record in data.items()
        }

    if isinstance(data, list):
        dictionary = {}
        for record in data:
            if not isinstance(record, dict) or not record.get(FIELD_NAME_KEY):
                raise ValueError(f"Every record needs a '{FIELD_NAME_KEY}' key")
            dictionary[str(record[FIELD_NAME_KEY])] = {
                key: _cell(value) for key, value in record.items()
            }
        return dictionary

    raise ValueError("Data dictionary JSON must be a list or an object of field records")


def parse_dictionary_content(content: str, filename: str) -> dict:
    """Parse file content, picking the format from the file extension."""
    if filename.lower().endswith(".json"):
        return parse_json_content(content)
    if filename.lower().endswith(".csv"):
        return parse_csv_content(content)
    raise ValueError(f"Unsupported data dictionary format: {filename}")


def parse_dictionary_file(file_path: str) -> ParsedDictionary:
    """
    Parse a data dictionary file from disk.

    Raises:
        ValueError: for unsupported extensions or malformed JSON records
        OSError: if the file cannot be read
    """
    path = Path(file_path)
    content = path.read_text(encoding="utf-8-sig")
    fields = parse_dictionary_content(content, path.name)
    logger.info(f"Parsed {len(fields)} fields from {path.name}")
    return ParsedDictionary(fields=fields, filename=path.name, file_path=str(path))
