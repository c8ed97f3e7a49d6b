"""
Database connection and session management.

The host system's tables may live in SQLite (default), PostgreSQL, MySQL or
SQL Server; the backend is picked from DATABASE_URL.
"""
import logging
from urllib.parse import urlparse

from sqlalchemy import create_engine, text, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base
from config import settings

logger = logging.getLogger(__name__)

VERSION_QUERIES = {
    "sqlite": ("SELECT sqlite_version()", "SQLite {}"),
    "postgresql": ("SELECT version()", "{}"),
    "mysql": ("SELECT version()", "MySQL {}"),
    "mssql": ("SELECT @@VERSION", "{}"),
}


def get_database_type(url: str = None) -> str:
    """Backend name for a database URL (defaults to the configured one)."""
    scheme = (url or settings.DATABASE_URL).lower().split(":", 1)[0]
    backend = scheme.split("+", 1)[0]
    if backend == "postgres":
        return "postgresql"
    if backend in VERSION_QUERIES:
        return backend
    return "unknown"


def create_db_engine():
    if get_database_type() == "sqlite":
        # Sessions are shared across the API's worker threads
        return create_engine(
            settings.DATABASE_URL,
            connect_args={"check_same_thread": False},
            echo=settings.DEBUG
        )
    return create_engine(
        settings.DATABASE_URL,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_timeout=settings.DATABASE_POOL_TIMEOUT,
        pool_pre_ping=True,
        echo=settings.DEBUG
    )


engine = create_db_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Dependency for FastAPI to get database sessions."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create the project, revision, field metadata, user and log tables."""
    import database.models  # noqa: F401  registers the tables on Base
    Base.metadata.create_all(bind=engine)
    logger.info(f"Database initialized: {get_database_type()}")


def drop_db():
    """Drop every table. Only used to reset throwaway databases."""
    Base.metadata.drop_all(bind=engine)
    logger.warning(f"Dropped all tables from {get_database_type()} database")


def _masked_url() -> str:
    parsed = urlparse(settings.DATABASE_URL)
    if parsed.password:
        return settings.DATABASE_URL.replace(parsed.password, "****")
    return settings.DATABASE_URL


def get_database_info() -> dict:
    """Connection details, server version and the tables present."""
    db_type = get_database_type()
    info = {
        "type": db_type,
        "driver": engine.dialect.name,
        "connection_string": _masked_url(),
        "pool_size": settings.DATABASE_POOL_SIZE if db_type != "sqlite" else "N/A",
    }

    try:
        with engine.connect() as conn:
            if db_type in VERSION_QUERIES:
                query, template = VERSION_QUERIES[db_type]
                version = str(conn.execute(text(query)).scalar())
                info["version"] = template.format(version.split("\n")[0])
            else:
                info["version"] = "Unknown"
        info["tables"] = sorted(inspect(engine).get_table_names())
        info["status"] = "connected"
    except SQLAlchemyError as e:
        logger.error(f"Database status check failed: {e}")
        info["status"] = "error"
        info["error"] = str(e)
        info["version"] = "N/A"

    return info
