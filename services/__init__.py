# Data Dictionary Revisions v1.0.0
"""
Services package for Data Dictionary Revisions.
Contains dictionary retrieval, revision history, identity lookup and the
revision comparison service.
"""
from services.exceptions import (
    RevisionError,
    ProjectNotFoundError,
    RevisionNotFoundError,
    InsufficientRevisionsError
)
from services.identity import IdentityResolver, UNKNOWN_USER, create_user
from services.dictionaries import (
    get_project,
    get_dictionary,
    order_revisions,
    create_project,
    save_current_dictionary,
    move_to_production,
    commit_revision
)
from services.revisions import RevisionDescriptor, get_all_revisions, require_comparable
from services.comparator import compare_revisions

__all__ = [
    "RevisionError",
    "ProjectNotFoundError",
    "RevisionNotFoundError",
    "InsufficientRevisionsError",
    "IdentityResolver",
    "UNKNOWN_USER",
    "create_user",
    "get_project",
    "get_dictionary",
    "order_revisions",
    "create_project",
    "save_current_dictionary",
    "move_to_production",
    "commit_revision",
    "RevisionDescriptor",
    "get_all_revisions",
    "require_comparable",
    "compare_revisions"
]
