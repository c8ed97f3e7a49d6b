"""
Revision comparison service.

Fetches the two data dictionaries for a pair of revision handles and runs
the comparison engine over them. Nothing is cached: every call reads both
dictionaries fresh.
"""
import logging

from sqlalchemy.orm import Session

from core import compare_dictionaries, ComparisonResult
from services.dictionaries import get_dictionary, order_revisions, RevisionHandle

logger = logging.getLogger(__name__)


def compare_revisions(
    db: Session,
    project_id: int,
    revision_one: RevisionHandle,
    revision_two: RevisionHandle
) -> ComparisonResult:
    """
    Compare two revisions of a project's data dictionary.

    The handles may be given in any order; the newer revision is always
    compared against the older one.
    """
    newer_revision, older_revision = order_revisions(revision_one, revision_two)

    newer = get_dictionary(db, project_id, newer_revision)
    older = get_dictionary(db, project_id, older_revision)

    result = compare_dictionaries(
        newer,
        older,
        newer_revision=newer_revision,
        older_revision=older_revision
    )

    summary = result.summary
    logger.info(
        f"Project {project_id}: compared revision {newer_revision} to {older_revision} - "
        f"{summary.fields_added} added, {summary.fields_deleted} deleted, "
        f"{summary.fields_modified} modified"
    )
    return result
