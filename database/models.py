"""
Data Dictionary Revisions Database Models

Host-system tables holding projects, their active and archived data
dictionaries, production revision approvals and the users involved.
"""
from datetime import datetime
import json

from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Boolean,
    ForeignKey, Index
)
from sqlalchemy.orm import relationship
from database.connection import Base


# Log event descriptions written by the host system
AUTOMATIC_APPROVAL_DESCRIPTION = "Approve production project modifications (automatic)"
MANUAL_APPROVAL_DESCRIPTION = "Approve production project modifications"
MOVE_TO_PRODUCTION_DESCRIPTION = "Move project to production status"


# ============================================================
# USERS
# ============================================================

class UserInformation(Base):
    """Host-system user accounts, referenced by numeric id."""
    __tablename__ = "user_information"

    ui_id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    user_firstname = Column(String(100), nullable=True)
    user_lastname = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


# ============================================================
# PROJECTS
# ============================================================

class Project(Base):
    """A data-collection project."""
    __tablename__ = "projects"

    project_id = Column(Integer, primary_key=True, autoincrement=True)
    app_title = Column(String(255), nullable=False)
    production_time = Column(DateTime, nullable=True)  # When the project was moved to production
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    revisions = relationship("ProductionRevision", back_populates="project", cascade="all, delete-orphan")
    fields = relationship("FieldMetadata", back_populates="project", cascade="all, delete-orphan")


# ============================================================
# PRODUCTION REVISIONS
# ============================================================

class ProductionRevision(Base):
    """
    An approved (or pending) change to a production project's data dictionary.
    The archived field definitions of the revision live in FieldMetadata.
    """
    __tablename__ = "metadata_prod_revisions"

    pr_id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.project_id"), nullable=False)
    ui_id_requester = Column(Integer, ForeignKey("user_information.ui_id"), nullable=True)
    ui_id_approver = Column(Integer, ForeignKey("user_information.ui_id"), nullable=True)
    ts_req_approval = Column(DateTime, nullable=True)
    ts_approved = Column(DateTime, nullable=True)  # NULL while the request is pending

    # Relationships
    project = relationship("Project", back_populates="revisions")
    fields = relationship("FieldMetadata", back_populates="revision")

    __table_args__ = (
        Index("idx_revision_project", "project_id", "pr_id"),
    )


# ============================================================
# FIELD METADATA (current and archived data dictionaries)
# ============================================================

class FieldMetadata(Base):
    """
    One field definition of a data dictionary.

    Rows with revision_id NULL form the currently active dictionary; rows
    with a revision_id form the dictionary archived for that revision.
    """
    __tablename__ = "field_metadata"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.project_id"), nullable=False)
    revision_id = Column(Integer, ForeignKey("metadata_prod_revisions.pr_id"), nullable=True)
    field_name = Column(String(100), nullable=False)
    field_order = Column(Integer, nullable=False)
    attributes_json = Column(Text, nullable=False)  # Ordered JSON object of attribute -> value

    # Relationships
    project = relationship("Project", back_populates="fields")
    revision = relationship("ProductionRevision", back_populates="fields")

    __table_args__ = (
        Index("idx_field_project_revision", "project_id", "revision_id", "field_order"),
    )

    @property
    def attributes(self) -> dict:
        """Attribute record in stored order."""
        return json.loads(self.attributes_json)


# ============================================================
# LOG EVENTS
# ============================================================

class LogEvent(Base):
    """
    Project activity log. Used to tell automatic approvals apart and to find
    who moved a project to production.
    """
    __tablename__ = "log_events"

    log_event_id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.project_id"), nullable=False)
    ts = Column(DateTime, nullable=False, index=True)
    user = Column(String(50), nullable=True)  # username
    description = Column(String(255), nullable=True)
    is_system = Column(Boolean, default=False)

    __table_args__ = (
        Index("idx_log_project_ts", "project_id", "ts"),
    )
