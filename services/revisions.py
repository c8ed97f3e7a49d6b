"""
Production revision history.

Lists every data dictionary revision of a project, newest first, with the
approval metadata a reviewer needs to pick two revisions to compare.

The host system stores, for each production revision, the dictionary that
was active *until* that revision was approved. The approval metadata on a
row therefore describes the next revision, so after ordering the list the
timestamps, requesters and approvers are shifted down by one:
- each archived revision takes the metadata of the next older row
- the oldest revision ("Moved to Production") takes the project's
  production time and the user who moved it to production
- the current revision takes the metadata of the newest row
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import and_
from sqlalchemy.orm import Session

from core import CURRENT_REVISION
from database import (
    ProductionRevision, LogEvent, AUTOMATIC_APPROVAL_DESCRIPTION, MOVE_TO_PRODUCTION_DESCRIPTION
)
from services.dictionaries import get_project
from services.exceptions import InsufficientRevisionsError, RevisionNotFoundError
from services.identity import IdentityResolver

logger = logging.getLogger(__name__)

MOVED_TO_PRODUCTION_LABEL = "Moved to Production"


@dataclass
class RevisionDescriptor:
    """One selectable data dictionary revision."""
    id: str
    label: str
    ts_approved: Optional[datetime] = None
    requester: str = "Unknown"
    approver: str = "Unknown"
    automatic_approval: bool = False
    is_current: bool = False
    is_production_move: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "ts_approved": self.ts_approved.isoformat() if self.ts_approved else None,
            "requester": self.requester,
            "approver": self.approver,
            "automatic_approval": self.automatic_approval,
            "is_current": self.is_current,
            "is_production_move": self.is_production_move,
        }


def _approved_revisions(db: Session, project_id: int) -> list[tuple[ProductionRevision, bool]]:
    """Approved revisions in id order, each with its automatic-approval flag."""
    rows = db.query(ProductionRevision, LogEvent.log_event_id).outerjoin(
        LogEvent,
        and_(
            LogEvent.project_id == ProductionRevision.project_id,
            LogEvent.ts == ProductionRevision.ts_approved,
            LogEvent.description == AUTOMATIC_APPROVAL_DESCRIPTION
        )
    ).filter(
        ProductionRevision.project_id == project_id,
        ProductionRevision.ts_approved != None
    ).order_by(ProductionRevision.pr_id).all()

    # The outer join can repeat a revision when several log events share its timestamp
    seen = {}
    for revision, automatic_log_id in rows:
        automatic = automatic_log_id is not None
        if revision.pr_id in seen:
            seen[revision.pr_id] = (revision, seen[revision.pr_id][1] or automatic)
        else:
            seen[revision.pr_id] = (revision, automatic)
    return list(seen.values())


def _production_mover(db: Session, project_id: int, timestamp: datetime, resolver: IdentityResolver) -> Optional[str]:
    event = db.query(LogEvent).filter(
        LogEvent.project_id == project_id,
        LogEvent.description == MOVE_TO_PRODUCTION_DESCRIPTION,
        LogEvent.ts == timestamp
    ).order_by(LogEvent.log_event_id.desc()).first()
    if not event:
        return None
    return resolver.resolve_username(event.user)


def get_all_revisions(
    db: Session,
    project_id: int,
    resolver: Optional[IdentityResolver] = None
) -> list[RevisionDescriptor]:
    """
    Retrieve every data dictionary revision of a project, newest first.

    Returns an empty list when the project has no approved revisions.

    Raises:
        ProjectNotFoundError: unknown project
    """
    project = get_project(db, project_id)
    resolver = resolver or IdentityResolver(db)

    rows = _approved_revisions(db, project_id)
    if not rows:
        return []

    versions = []
    for rev_num, (revision, automatic) in enumerate(rows):
        versions.append(RevisionDescriptor(
            id=str(revision.pr_id),
            label=MOVED_TO_PRODUCTION_LABEL if rev_num == 0 else f"Production Revision #{rev_num}",
            ts_approved=revision.ts_approved,
            requester=resolver.resolve(revision.ui_id_requester),
            approver=resolver.resolve(revision.ui_id_approver),
            automatic_approval=automatic,
            is_production_move=rev_num == 0,
        ))

    newest = versions[-1]
    current = RevisionDescriptor(
        id=CURRENT_REVISION,
        label=f"Production Revision #{len(rows)} (Current Revision)",
        ts_approved=newest.ts_approved,
        requester=newest.requester,
        approver=newest.approver,
        automatic_approval=newest.automatic_approval,
        is_current=True,
    )

    versions.reverse()

    # Shift approval metadata down by one
    for newer, older in zip(versions, versions[1:]):
        newer.ts_approved = older.ts_approved
        newer.requester = older.requester
        newer.approver = older.approver
        newer.automatic_approval = older.automatic_approval

    oldest = versions[-1]
    oldest.ts_approved = project.production_time
    if project.production_time:
        mover = _production_mover(db, project_id, project.production_time, resolver)
        if mover:
            oldest.approver = mover

    versions.insert(0, current)
    logger.debug(f"Project {project_id}: {len(versions)} revisions, {resolver.lookups} user lookups")
    return versions


def require_comparable(revisions: Sequence[RevisionDescriptor], handles: Sequence[str]) -> tuple[RevisionDescriptor, RevisionDescriptor]:
    """
    Check that a comparison can run and return the two selected descriptors.

    Raises:
        InsufficientRevisionsError: fewer than two revisions exist or fewer
            than two distinct handles were selected
        RevisionNotFoundError: a selected handle is not in the history
    """
    if len(revisions) < 2:
        raise InsufficientRevisionsError(
            "There must be at least two revisions of the data dictionary to compare"
        )

    selected = list(dict.fromkeys(str(h) for h in handles if h is not None and str(h) != ""))
    if len(selected) < 2:
        raise InsufficientRevisionsError("Select two data dictionary revisions to compare")

    by_id = {r.id: r for r in revisions}
    found = []
    for handle in selected[:2]:
        if handle not in by_id:
            raise RevisionNotFoundError(f"Revision {handle} not found")
        found.append(by_id[handle])
    return found[0], found[1]
