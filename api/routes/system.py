"""
System routes for Data Dictionary Revisions.

Provides database status and project listing.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func

from database import get_db, get_database_info, Project, ProductionRevision

router = APIRouter()


@router.get("/database")
async def get_database_status():
    """Get database connection info."""
    return get_database_info()


@router.get("/projects")
async def list_projects(db: Session = Depends(get_db)):
    """List projects with their number of approved revisions."""
    counts = dict(
        db.query(ProductionRevision.project_id, func.count(ProductionRevision.pr_id))
        .filter(ProductionRevision.ts_approved != None)
        .group_by(ProductionRevision.project_id)
        .all()
    )
    projects = db.query(Project).order_by(Project.project_id).all()

    return [
        {
            "project_id": p.project_id,
            "app_title": p.app_title,
            "production_time": p.production_time.isoformat() if p.production_time else None,
            "approved_revisions": counts.get(p.project_id, 0)
        }
        for p in projects
    ]
