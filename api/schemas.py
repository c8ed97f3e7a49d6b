"""
Pydantic schemas for the Data Dictionary Revisions API.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


# ============================================================
# REVISION SCHEMAS
# ============================================================

class RevisionResponse(BaseModel):
    id: str
    label: str
    ts_approved: Optional[datetime] = None
    requester: str
    approver: str
    automatic_approval: bool = False
    is_current: bool = False
    is_production_move: bool = False

    class Config:
        from_attributes = True


class ProjectRevisionsResponse(BaseModel):
    project_id: int
    app_title: str
    revisions: list[RevisionResponse]


# ============================================================
# COMPARISON SCHEMAS
# ============================================================

class SummarySchema(BaseModel):
    fields_added: int
    fields_deleted: int
    fields_modified: int
    total_fields_before: int
    total_fields_after: int


class AttributeChangeSchema(BaseModel):
    name: str
    new_value: Optional[str] = None
    old_value: Optional[str] = None
    changed: bool = False


class ChangeEntrySchema(BaseModel):
    field_name: str
    status: str  # added, deleted, modified
    attributes: list[AttributeChangeSchema]


class ComparisonResponse(BaseModel):
    newer_revision: Optional[str] = None
    older_revision: Optional[str] = None
    is_identical: bool
    summary: SummarySchema
    headers: list[str]
    entries: list[ChangeEntrySchema]


class FileComparisonResponse(ComparisonResponse):
    newer_file: str
    older_file: str
