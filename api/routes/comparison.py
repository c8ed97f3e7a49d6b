"""
Comparison routes for Data Dictionary Revisions.

Provides the manual comparison of two uploaded data dictionary files.
"""
import json

from fastapi import APIRouter, UploadFile, File, HTTPException

from core import compare_dictionaries, parse_dictionary_content
from api.schemas import FileComparisonResponse

router = APIRouter()

SUPPORTED_EXTENSIONS = (".csv", ".json")


async def _read_dictionary(upload: UploadFile, label: str) -> dict:
    if not upload.filename or not upload.filename.lower().endswith(SUPPORTED_EXTENSIONS):
        raise HTTPException(status_code=400, detail=f"{label} file must be CSV or JSON")

    try:
        content = (await upload.read()).decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail=f"{label} file is not UTF-8 text")

    try:
        return parse_dictionary_content(content, upload.filename)
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=400, detail=f"Invalid JSON in {label.lower()} file: {e}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid {label.lower()} file: {e}")


@router.post("/files", response_model=FileComparisonResponse)
async def compare_files(
    newer_file: UploadFile = File(...),
    older_file: UploadFile = File(...)
):
    """
    Compare two uploaded data dictionary files (newer first).
    """
    newer = await _read_dictionary(newer_file, "Newer")
    older = await _read_dictionary(older_file, "Older")

    result = compare_dictionaries(newer, older)

    return {
        "newer_file": newer_file.filename,
        "older_file": older_file.filename,
        **result.to_dict()
    }
