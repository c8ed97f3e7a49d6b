"""
Data dictionary retrieval and revision recording.

Retrieval turns a revision handle into a Dictionary: the sentinel "current"
selects the project's active field set, anything else is a production
revision id whose archived field set is returned.

Recording is the host-side counterpart used to populate the store: saving
the active dictionary, moving a project to production and approving a
production revision (archiving the active dictionary under a new revision).
"""
import json
import logging
from datetime import datetime
from typing import Optional, Union

from sqlalchemy.orm import Session

from core import CURRENT_REVISION, Dictionary
from database import (
    Project, ProductionRevision, FieldMetadata, UserInformation, LogEvent,
    AUTOMATIC_APPROVAL_DESCRIPTION, MANUAL_APPROVAL_DESCRIPTION,
    MOVE_TO_PRODUCTION_DESCRIPTION
)
from services.exceptions import ProjectNotFoundError, RevisionNotFoundError

logger = logging.getLogger(__name__)

RevisionHandle = Union[str, int]


def get_project(db: Session, project_id: int) -> Project:
    project = db.query(Project).filter(Project.project_id == project_id).first()
    if not project:
        raise ProjectNotFoundError(f"Project {project_id} not found")
    return project


def _parse_revision_id(revision: RevisionHandle) -> int:
    try:
        return int(revision)
    except (TypeError, ValueError):
        raise RevisionNotFoundError(f"Invalid revision handle: {revision!r}")


def is_current(revision: RevisionHandle) -> bool:
    return str(revision) == CURRENT_REVISION


def get_dictionary(db: Session, project_id: int, revision: RevisionHandle) -> Dictionary:
    """
    Retrieve the data dictionary of a project at a revision.

    Args:
        db: Database session
        project_id: The project ID
        revision: "current" or a production revision id

    Returns:
        Ordered mapping of field name -> attribute record

    Raises:
        ProjectNotFoundError: unknown project
        RevisionNotFoundError: the revision does not exist for this project
    """
    get_project(db, project_id)

    query = db.query(FieldMetadata).filter(FieldMetadata.project_id == project_id)

    if is_current(revision):
        query = query.filter(FieldMetadata.revision_id == None)
    else:
        revision_id = _parse_revision_id(revision)
        exists = db.query(ProductionRevision).filter(
            ProductionRevision.pr_id == revision_id,
            ProductionRevision.project_id == project_id
        ).first()
        if not exists:
            raise RevisionNotFoundError(f"Revision {revision} not found for project {project_id}")
        query = query.filter(FieldMetadata.revision_id == revision_id)

    rows = query.order_by(FieldMetadata.field_order, FieldMetadata.id).all()
    dictionary = {row.field_name: row.attributes for row in rows}
    logger.debug(f"Loaded {len(dictionary)} fields for project {project_id} revision {revision}")
    return dictionary


def order_revisions(revision_one: RevisionHandle, revision_two: RevisionHandle) -> tuple[str, str]:
    """
    Return (newer, older) for two revision handles.

    The current revision is always the newer one; otherwise the higher
    revision id is newer.
    """
    if is_current(revision_one):
        return CURRENT_REVISION, str(revision_two)
    if is_current(revision_two):
        return CURRENT_REVISION, str(revision_one)
    if _parse_revision_id(revision_one) >= _parse_revision_id(revision_two):
        return str(revision_one), str(revision_two)
    return str(revision_two), str(revision_one)


# ============================================================
# RECORDING
# ============================================================

def _write_fields(db: Session, project_id: int, dictionary: Dictionary, revision_id: Optional[int]):
    for order, (field_name, record) in enumerate(dictionary.items(), 1):
        db.add(FieldMetadata(
            project_id=project_id,
            revision_id=revision_id,
            field_name=field_name,
            field_order=order,
            attributes_json=json.dumps(dict(record))
        ))


def create_project(db: Session, title: str) -> Project:
    project = Project(app_title=title)
    db.add(project)
    db.commit()
    logger.info(f"Created project {project.project_id}: {title}")
    return project


def save_current_dictionary(db: Session, project_id: int, dictionary: Dictionary) -> int:
    """Replace the active data dictionary of a project. Returns the field count."""
    get_project(db, project_id)
    db.query(FieldMetadata).filter(
        FieldMetadata.project_id == project_id,
        FieldMetadata.revision_id == None
    ).delete(synchronize_session=False)
    _write_fields(db, project_id, dictionary, None)
    db.commit()
    logger.info(f"Saved {len(dictionary)} fields as current dictionary of project {project_id}")
    return len(dictionary)


def _get_user(db: Session, username: Optional[str]) -> Optional[UserInformation]:
    if not username:
        return None
    return db.query(UserInformation).filter(UserInformation.username == username).first()


def move_to_production(
    db: Session,
    project_id: int,
    username: Optional[str] = None,
    timestamp: Optional[datetime] = None
) -> datetime:
    """Mark a project as moved to production and log who did it."""
    project = get_project(db, project_id)
    timestamp = timestamp or datetime.utcnow().replace(microsecond=0)

    project.production_time = timestamp
    db.add(LogEvent(
        project_id=project_id,
        ts=timestamp,
        user=username,
        description=MOVE_TO_PRODUCTION_DESCRIPTION
    ))
    db.commit()
    logger.info(f"Project {project_id} moved to production at {timestamp.isoformat()}")
    return timestamp


def commit_revision(
    db: Session,
    project_id: int,
    new_dictionary: Dictionary,
    requester: Optional[str] = None,
    approver: Optional[str] = None,
    automatic: bool = False,
    timestamp: Optional[datetime] = None
) -> ProductionRevision:
    """
    Approve a production revision.

    The active dictionary is archived under a new revision, the approval is
    logged (automatic approvals with their own description) and the active
    dictionary is replaced by ``new_dictionary``.
    """
    get_project(db, project_id)
    timestamp = timestamp or datetime.utcnow().replace(microsecond=0)

    requester_user = _get_user(db, requester)
    approver_user = _get_user(db, approver)

    revision = ProductionRevision(
        project_id=project_id,
        ui_id_requester=requester_user.ui_id if requester_user else None,
        ui_id_approver=approver_user.ui_id if approver_user else None,
        ts_req_approval=timestamp,
        ts_approved=timestamp
    )
    db.add(revision)
    db.flush()

    current = get_dictionary(db, project_id, CURRENT_REVISION)
    _write_fields(db, project_id, current, revision.pr_id)

    db.add(LogEvent(
        project_id=project_id,
        ts=timestamp,
        user=approver,
        description=AUTOMATIC_APPROVAL_DESCRIPTION if automatic else MANUAL_APPROVAL_DESCRIPTION,
        is_system=automatic
    ))
    db.commit()

    save_current_dictionary(db, project_id, new_dictionary)
    logger.info(
        f"Approved revision {revision.pr_id} for project {project_id} "
        f"({'automatic' if automatic else 'manual'})"
    )
    return revision
