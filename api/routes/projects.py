"""
Project revision routes for Data Dictionary Revisions.

Lists a project's data dictionary revisions and compares two of them, as
JSON or as a downloadable HTML/Excel/CSV/PDF report.
"""
import io
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse, StreamingResponse
from sqlalchemy.orm import Session

from config import settings
from core import ComparisonResult
from database import get_db
from api.schemas import ProjectRevisionsResponse, RevisionResponse, ComparisonResponse
from services import (
    IdentityResolver,
    get_project,
    get_all_revisions,
    require_comparable,
    compare_revisions,
    ProjectNotFoundError,
    RevisionNotFoundError,
    InsufficientRevisionsError
)
from reporters import render_comparison, render_revisions_page, generate_xlsx, generate_csv, generate_pdf

logger = logging.getLogger(__name__)
router = APIRouter()

EXPORT_MEDIA_TYPES = {
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "csv": "text/csv",
    "pdf": "application/pdf",
}


def run_comparison(
    db: Session,
    project_id: int,
    revision_one: Optional[str],
    revision_two: Optional[str]
) -> tuple[ComparisonResult, dict]:
    """
    Validate the selection against the revision history and compare.

    Returns the comparison and a mapping of revision id -> label.
    Domain errors are translated to HTTP errors here.
    """
    resolver = IdentityResolver(db)
    try:
        revisions = get_all_revisions(db, project_id, resolver)
        require_comparable(revisions, [revision_one, revision_two])
        result = compare_revisions(db, project_id, revision_one, revision_two)
    except (ProjectNotFoundError, RevisionNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InsufficientRevisionsError as e:
        raise HTTPException(status_code=400, detail=str(e))

    labels = {r.id: r.label for r in revisions}
    return result, labels


@router.get("/{project_id}/revisions", response_model=ProjectRevisionsResponse)
async def list_revisions(project_id: int, db: Session = Depends(get_db)):
    """List all production revisions of the project's data dictionary, newest first."""
    try:
        project = get_project(db, project_id)
        revisions = get_all_revisions(db, project_id, IdentityResolver(db))
    except ProjectNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return ProjectRevisionsResponse(
        project_id=project.project_id,
        app_title=project.app_title,
        revisions=[RevisionResponse(**r.to_dict()) for r in revisions]
    )


@router.get("/{project_id}/compare", response_model=ComparisonResponse)
async def compare(
    project_id: int,
    revision_one: Optional[str] = Query(None),
    revision_two: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """Compare two revisions of the data dictionary."""
    result, _ = run_comparison(db, project_id, revision_one, revision_two)
    return result.to_dict()


@router.get("/{project_id}/compare/html", response_class=HTMLResponse)
async def compare_html(
    project_id: int,
    revision_one: Optional[str] = Query(None),
    revision_two: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """Details, key and table of changes as an HTML fragment."""
    result, labels = run_comparison(db, project_id, revision_one, revision_two)
    return render_comparison(
        result,
        labels.get(result.newer_revision),
        labels.get(result.older_revision),
        download_base=f"/api/projects/{project_id}/compare"
    )


@router.get("/{project_id}/compare/{fmt}")
async def download_comparison(
    project_id: int,
    fmt: str,
    revision_one: Optional[str] = Query(None),
    revision_two: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """Download the comparison as an Excel workbook, CSV file or PDF report."""
    if fmt not in EXPORT_MEDIA_TYPES:
        raise HTTPException(status_code=404, detail=f"Unsupported export format: {fmt}")

    result, labels = run_comparison(db, project_id, revision_one, revision_two)

    if fmt == "xlsx":
        content = generate_xlsx(result)
    elif fmt == "csv":
        content = io.BytesIO(generate_csv(result).encode("utf-8"))
    else:
        project = get_project(db, project_id)
        content = generate_pdf(
            result,
            project_title=project.app_title,
            newer_label=labels.get(result.newer_revision),
            older_label=labels.get(result.older_revision)
        )

    filename = f"{settings.EXPORT_FILENAME}.{fmt}"
    logger.info(f"Project {project_id}: exported comparison as {filename}")

    return StreamingResponse(
        content,
        media_type=EXPORT_MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


# ============================================================
# HTML PAGE
# ============================================================

page_router = APIRouter()


@page_router.get("/projects/{project_id}", response_class=HTMLResponse)
async def revisions_page(
    project_id: int,
    dictionaries: list[str] = Query([]),
    db: Session = Depends(get_db)
):
    """Revision history page; renders the comparison once two revisions are selected."""
    try:
        project = get_project(db, project_id)
        revisions = get_all_revisions(db, project_id, IdentityResolver(db))
    except ProjectNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    comparison_html = None
    error = None
    if len(dictionaries) >= 2:
        try:
            result, labels = run_comparison(db, project_id, dictionaries[0], dictionaries[1])
            comparison_html = render_comparison(
                result,
                labels.get(result.newer_revision),
                labels.get(result.older_revision),
                download_base=f"/api/projects/{project_id}/compare"
            )
        except HTTPException as e:
            error = e.detail

    return render_revisions_page(
        project.app_title,
        revisions,
        comparison_html=comparison_html,
        selected=dictionaries,
        error=error
    )
