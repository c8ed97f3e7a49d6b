"""Revision lookup exceptions."""


class RevisionError(Exception):
    """Base class for revision lookup errors."""


class ProjectNotFoundError(RevisionError):
    """No project with the given id."""


class RevisionNotFoundError(RevisionError):
    """The revision handle does not belong to the project."""


class InsufficientRevisionsError(RevisionError):
    """Fewer than two revisions exist, or fewer than two were selected."""
