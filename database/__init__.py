# Data Dictionary Revisions v1.0.0
"""
Database package for Data Dictionary Revisions.

Supports multiple SQL backends:
- SQLite (default)
- PostgreSQL
- MySQL
- SQL Server
"""
from database.connection import (
    Base, engine, SessionLocal, get_db, init_db, drop_db,
    get_database_type, get_database_info
)
from database.models import (
    Project,
    ProductionRevision,
    FieldMetadata,
    UserInformation,
    LogEvent,
    AUTOMATIC_APPROVAL_DESCRIPTION,
    MANUAL_APPROVAL_DESCRIPTION,
    MOVE_TO_PRODUCTION_DESCRIPTION
)

__all__ = [
    "Base", "engine", "SessionLocal", "get_db", "init_db", "drop_db",
    "get_database_type", "get_database_info",
    "Project",
    "ProductionRevision",
    "FieldMetadata",
    "UserInformation",
    "LogEvent",
    "AUTOMATIC_APPROVAL_DESCRIPTION",
    "MANUAL_APPROVAL_DESCRIPTION",
    "MOVE_TO_PRODUCTION_DESCRIPTION"
]
