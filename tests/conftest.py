import os
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

# The engine is created when the database package is imported
_DB_DIR = tempfile.mkdtemp(prefix="ddrevisions-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{Path(_DB_DIR) / 'test.db'}"
os.environ.setdefault("DEBUG", "false")

from database import SessionLocal, init_db, drop_db  # noqa: E402
from services import (  # noqa: E402
    create_project,
    create_user,
    save_current_dictionary,
    move_to_production,
    commit_revision,
)


@pytest.fixture
def db():
    init_db()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_db()


@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient
    from api.main import app

    with TestClient(app) as test_client:
        yield test_client


def make_field(name: str, label: str, field_type: str = "text", **extra) -> dict:
    record = {"field_name": name, "field_label": label, "field_type": field_type}
    record.update(extra)
    return record


def make_dictionary(*records: dict) -> dict:
    return {r["field_name"]: r for r in records}


PRODUCTION_DICTIONARY = make_dictionary(
    make_field("record_id", "Record ID"),
    make_field("age", "Age", "text"),
    make_field("consent", "Consent given?", "yesno"),
)

REVISION_ONE_DICTIONARY = make_dictionary(
    make_field("record_id", "Record ID"),
    make_field("age", "Age at enrollment", "text"),
    make_field("consent", "Consent given?", "yesno"),
    make_field("weight", "Weight (kg)", "text"),
)

CURRENT_DICTIONARY = make_dictionary(
    make_field("record_id", "Record ID"),
    make_field("age", "Age at enrollment", "text"),
    make_field("weight", "Weight (kg)", "text"),
    make_field("height", "Height (cm)", "text"),
)

MOVED_AT = datetime(2024, 1, 10, 9, 0, 0)
FIRST_APPROVAL_AT = datetime(2024, 2, 1, 12, 0, 0)
SECOND_APPROVAL_AT = datetime(2024, 3, 15, 16, 30, 0)


@pytest.fixture
def seeded_project(db):
    """
    A project moved to production by alice with two approved revisions:
    a manual one approved by bob and an automatic one.
    """
    create_user(db, "alice", "Alice", "Adams")
    create_user(db, "bob", "Bob", "Brown")
    create_user(db, "carol", "Carol", "Clark")

    project = create_project(db, "Sleep Study")
    save_current_dictionary(db, project.project_id, PRODUCTION_DICTIONARY)
    move_to_production(db, project.project_id, "alice", timestamp=MOVED_AT)

    first = commit_revision(
        db, project.project_id, REVISION_ONE_DICTIONARY,
        requester="carol", approver="bob", timestamp=FIRST_APPROVAL_AT
    )
    second = commit_revision(
        db, project.project_id, CURRENT_DICTIONARY,
        requester="carol", automatic=True, timestamp=SECOND_APPROVAL_AT
    )
    return {
        "project_id": project.project_id,
        "first_revision": str(first.pr_id),
        "second_revision": str(second.pr_id),
    }
