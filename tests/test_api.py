import csv
import io
import json

from core import CURRENT_REVISION


def test_health(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_list_revisions(client, seeded_project) -> None:
    response = client.get(f"/api/projects/{seeded_project['project_id']}/revisions")

    assert response.status_code == 200
    payload = response.json()
    assert payload["app_title"] == "Sleep Study"
    assert [r["id"] for r in payload["revisions"]] == [
        CURRENT_REVISION,
        seeded_project["second_revision"],
        seeded_project["first_revision"],
    ]
    assert payload["revisions"][0]["automatic_approval"] is True
    assert payload["revisions"][-1]["label"] == "Moved to Production"


def test_list_revisions_unknown_project(client) -> None:
    assert client.get("/api/projects/404/revisions").status_code == 404


def test_compare_revisions(client, seeded_project) -> None:
    response = client.get(
        f"/api/projects/{seeded_project['project_id']}/compare",
        params={"revision_one": seeded_project["first_revision"], "revision_two": CURRENT_REVISION},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["newer_revision"] == CURRENT_REVISION
    assert payload["older_revision"] == seeded_project["first_revision"]
    assert payload["summary"]["fields_added"] == 2
    assert payload["summary"]["fields_deleted"] == 1
    assert payload["summary"]["fields_modified"] == 1
    assert [e["status"] for e in payload["entries"]] == ["modified", "added", "added", "deleted"]

    age = payload["entries"][0]
    changed = [a for a in age["attributes"] if a["changed"]]
    assert changed == [{
        "name": "field_label",
        "new_value": "Age at enrollment",
        "old_value": "Age",
        "changed": True,
    }]


def test_compare_requires_two_revisions(client, seeded_project) -> None:
    url = f"/api/projects/{seeded_project['project_id']}/compare"

    assert client.get(url, params={"revision_one": CURRENT_REVISION}).status_code == 400
    assert client.get(url, params={
        "revision_one": CURRENT_REVISION, "revision_two": CURRENT_REVISION
    }).status_code == 400
    assert client.get(url, params={
        "revision_one": CURRENT_REVISION, "revision_two": "9999"
    }).status_code == 404


def test_compare_html_fragment(client, seeded_project) -> None:
    response = client.get(
        f"/api/projects/{seeded_project['project_id']}/compare/html",
        params={"revision_one": CURRENT_REVISION, "revision_two": seeded_project["second_revision"]},
    )

    assert response.status_code == 200
    assert "Comparing <u><b>Production Revision #2 (Current Revision)</b></u>" in response.text
    assert "to <u><b>Production Revision #1</b></u>" in response.text


def test_download_csv(client, seeded_project) -> None:
    response = client.get(
        f"/api/projects/{seeded_project['project_id']}/compare/csv",
        params={"revision_one": CURRENT_REVISION, "revision_two": seeded_project["first_revision"]},
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="comparison_of_changes.csv"' in response.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[0][-3:] == ["Change Type", "Changed Attributes", "Previous Values"]
    assert [row[0] for row in rows[1:]] == ["age", "weight", "height", "consent"]


def test_download_xlsx_and_pdf(client, seeded_project) -> None:
    params = {"revision_one": CURRENT_REVISION, "revision_two": seeded_project["first_revision"]}
    base = f"/api/projects/{seeded_project['project_id']}/compare"

    xlsx = client.get(f"{base}/xlsx", params=params)
    assert xlsx.status_code == 200
    assert xlsx.content[:2] == b"PK"
    assert 'filename="comparison_of_changes.xlsx"' in xlsx.headers["content-disposition"]

    pdf = client.get(f"{base}/pdf", params=params)
    assert pdf.status_code == 200
    assert pdf.content.startswith(b"%PDF")


def test_download_unknown_format(client, seeded_project) -> None:
    response = client.get(
        f"/api/projects/{seeded_project['project_id']}/compare/docx",
        params={"revision_one": CURRENT_REVISION, "revision_two": seeded_project["first_revision"]},
    )

    assert response.status_code == 404


def test_revisions_page(client, seeded_project) -> None:
    url = f"/projects/{seeded_project['project_id']}"

    page = client.get(url)
    assert page.status_code == 200
    assert "Project Revision History" in page.text
    assert "Table of Changes" not in page.text

    page = client.get(url, params=[
        ("dictionaries", CURRENT_REVISION),
        ("dictionaries", seeded_project["first_revision"]),
    ])
    assert page.status_code == 200
    assert "Table of Changes" in page.text
    assert "Fields added: 2" in page.text


def test_revisions_page_shows_selection_errors(client, seeded_project) -> None:
    page = client.get(f"/projects/{seeded_project['project_id']}", params=[
        ("dictionaries", CURRENT_REVISION),
        ("dictionaries", "9999"),
    ])

    assert page.status_code == 200
    assert "Revision 9999 not found" in page.text


def test_compare_uploaded_files(client) -> None:
    older = "field_name,field_label\nage,Age\ndob,DOB\n"
    newer = json.dumps([
        {"field_name": "age", "field_label": "Age (years)"},
        {"field_name": "email", "field_label": "Email"},
    ])

    response = client.post("/api/compare/files", files={
        "newer_file": ("new.json", newer, "application/json"),
        "older_file": ("old.csv", older, "text/csv"),
    })

    assert response.status_code == 200
    payload = response.json()
    assert payload["newer_file"] == "new.json"
    assert payload["older_file"] == "old.csv"
    assert [(e["field_name"], e["status"]) for e in payload["entries"]] == [
        ("age", "modified"), ("email", "added"), ("dob", "deleted")
    ]
    assert payload["summary"]["fields_modified"] == 1


def test_compare_uploaded_files_rejects_bad_input(client) -> None:
    response = client.post("/api/compare/files", files={
        "newer_file": ("new.txt", "x", "text/plain"),
        "older_file": ("old.csv", "field_name\nage\n", "text/csv"),
    })
    assert response.status_code == 400

    response = client.post("/api/compare/files", files={
        "newer_file": ("new.json", "{not json", "application/json"),
        "older_file": ("old.csv", "field_name\nage\n", "text/csv"),
    })
    assert response.status_code == 400


def test_system_projects(client, seeded_project) -> None:
    response = client.get("/api/system/projects")

    assert response.status_code == 200
    assert response.json() == [{
        "project_id": seeded_project["project_id"],
        "app_title": "Sleep Study",
        "production_time": "2024-01-10T09:00:00",
        "approved_revisions": 2,
    }]


def test_system_database_status(client) -> None:
    response = client.get("/api/system/database")

    assert response.status_code == 200
    payload = response.json()
    assert payload["type"] == "sqlite"
    assert payload["status"] == "connected"
    assert "metadata_prod_revisions" in payload["tables"]


def test_compare_uploaded_files_rejects_oversized_csv_cell(client) -> None:
    older = "field_name,field_label\nage," + "x" * 200_000 + "\n"

    response = client.post("/api/compare/files", files={
        "newer_file": ("new.csv", "field_name,field_label\nage,Age\n", "text/csv"),
        "older_file": ("old.csv", older, "text/csv"),
    })

    assert response.status_code == 400
    assert "Invalid CSV" in response.json()["detail"]
