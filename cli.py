# Data Dictionary Revisions v1.0.0
#!/usr/bin/env python3
"""
Data Dictionary Revisions CLI

Command-line interface for loading data dictionaries and comparing revisions.
"""
import argparse
import sys
from pathlib import Path


def init_db():
    """Initialize the database."""
    from database import init_db as db_init

    print("Initializing database...")
    db_init()
    print("Database initialized successfully!")


def create_project(title: str):
    from database import SessionLocal
    from services import create_project as svc_create_project

    db = SessionLocal()
    try:
        project = svc_create_project(db, title)
        print(f"Created project {project.project_id}: {project.app_title}")
    finally:
        db.close()


def add_user(username: str, first_name: str = None, last_name: str = None):
    from database import SessionLocal
    from services import create_user

    db = SessionLocal()
    try:
        user = create_user(db, username, first_name, last_name)
        print(f"Created user {user.username} (id {user.ui_id})")
    finally:
        db.close()


def load_dictionary(project_id: int, file_path: str):
    """Replace the current data dictionary of a project with a file."""
    from database import SessionLocal
    from core import parse_dictionary_file
    from services import save_current_dictionary

    parsed = parse_dictionary_file(file_path)
    db = SessionLocal()
    try:
        count = save_current_dictionary(db, project_id, parsed.fields)
        print(f"Loaded {count} fields from {parsed.filename} into project {project_id}")
    finally:
        db.close()


def move_to_production(project_id: int, username: str = None):
    from database import SessionLocal
    from services import move_to_production as svc_move_to_production

    db = SessionLocal()
    try:
        ts = svc_move_to_production(db, project_id, username)
        print(f"Project {project_id} moved to production at {ts.isoformat()}")
    finally:
        db.close()


def commit_revision(project_id: int, file_path: str, requester: str = None,
                    approver: str = None, automatic: bool = False):
    """Approve a production revision whose new dictionary is read from a file."""
    from database import SessionLocal
    from core import parse_dictionary_file
    from services import commit_revision as svc_commit_revision

    parsed = parse_dictionary_file(file_path)
    db = SessionLocal()
    try:
        revision = svc_commit_revision(
            db, project_id, parsed.fields,
            requester=requester, approver=approver, automatic=automatic
        )
        print(f"Approved revision {revision.pr_id} for project {project_id} ({parsed.field_count} fields)")
    finally:
        db.close()


def list_revisions(project_id: int):
    """List all data dictionary revisions of a project."""
    from database import SessionLocal
    from services import get_all_revisions

    db = SessionLocal()
    try:
        revisions = get_all_revisions(db, project_id)

        if len(revisions) < 2:
            print("There must be at least two revisions of the data dictionary to compare.")
            return

        print(f"\nRevisions of project {project_id} ({len(revisions)}):")
        print("-" * 60)

        for index, revision in enumerate(revisions):
            ts = revision.ts_approved.isoformat() if revision.ts_approved else "N/A"
            print(f"  [{revision.id}] {revision.label}")
            print(f"    Approved:  {ts}")
            if index == len(revisions) - 1:
                print(f"    Moved to production by {revision.approver}")
            else:
                print(f"    Requested by {revision.requester}")
                if revision.automatic_approval:
                    print("    Approved automatically")
                else:
                    print(f"    Approved by {revision.approver}")
            print()
    finally:
        db.close()


def _print_result(result, heading: str):
    from core import ChangeStatus

    summary = result.summary
    print(f"\n{heading}")
    print("=" * 60)
    print(f"  Fields added:                {summary.fields_added}")
    print(f"  Fields deleted:              {summary.fields_deleted}")
    print(f"  Fields modified:             {summary.fields_modified}")
    print(f"  Total fields BEFORE changes: {summary.total_fields_before}")
    print(f"  Total fields AFTER changes:  {summary.total_fields_after}")
    print()

    if result.is_identical:
        print("The data dictionaries are identical")
        return

    markers = {ChangeStatus.ADDED: "+", ChangeStatus.DELETED: "-", ChangeStatus.MODIFIED: "~"}
    for entry in result.change_set:
        print(f"  {markers[entry.status]} {entry.field_name} ({entry.status.label})")
        for attribute in entry.changed_attributes:
            print(f"      {attribute.name}: {attribute.old_value!r} -> {attribute.new_value!r}")


def compare_files(newer_path: str, older_path: str):
    """Compare two data dictionary files and print differences."""
    from core import parse_dictionary_file, compare_dictionaries

    newer = parse_dictionary_file(newer_path)
    older = parse_dictionary_file(older_path)

    result = compare_dictionaries(newer.fields, older.fields)
    _print_result(result, f"Comparing: {newer_path} to {older_path}")


def _compare_revisions(db, project_id: int, revision_one: str, revision_two: str):
    from services import get_all_revisions, require_comparable, compare_revisions

    revisions = get_all_revisions(db, project_id)
    require_comparable(revisions, [revision_one, revision_two])
    result = compare_revisions(db, project_id, revision_one, revision_two)
    return result, revisions


def diff_revisions(project_id: int, revision_one: str, revision_two: str):
    from database import SessionLocal

    db = SessionLocal()
    try:
        result, revisions = _compare_revisions(db, project_id, revision_one, revision_two)
        labels = {r.id: r.label for r in revisions}
        _print_result(
            result,
            f"Comparing {labels[result.newer_revision]} to {labels[result.older_revision]}"
        )
    finally:
        db.close()


def export_comparison(project_id: int, revision_one: str, revision_two: str, fmt: str, output: str = None):
    """Write a comparison report to a file."""
    from database import SessionLocal
    from config import settings
    from services import get_project
    from reporters import generate_xlsx, generate_csv, generate_pdf, render_comparison, render_revisions_page

    output_path = Path(output or f"{settings.EXPORT_FILENAME}.{fmt}")

    db = SessionLocal()
    try:
        result, revisions = _compare_revisions(db, project_id, revision_one, revision_two)
        labels = {r.id: r.label for r in revisions}
        newer_label = labels[result.newer_revision]
        older_label = labels[result.older_revision]

        if fmt == "xlsx":
            output_path.write_bytes(generate_xlsx(result).getvalue())
        elif fmt == "csv":
            output_path.write_text(generate_csv(result), encoding="utf-8", newline="")
        elif fmt == "pdf":
            project = get_project(db, project_id)
            output_path.write_bytes(
                generate_pdf(result, project.app_title, newer_label, older_label).getvalue()
            )
        else:
            project = get_project(db, project_id)
            fragment = render_comparison(result, newer_label, older_label)
            page = render_revisions_page(
                project.app_title, revisions,
                comparison_html=fragment,
                selected=[result.newer_revision, result.older_revision]
            )
            output_path.write_text(page, encoding="utf-8")

        print(f"Wrote {output_path}")
    finally:
        db.close()


def run_server(host: str = "0.0.0.0", port: int = 8000, reload: bool = False, workers: int = 1):
    """Run the FastAPI server."""
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=host,
        port=port,
        reload=reload,
        workers=workers if not reload else 1  # reload mode requires single worker
    )


def main():
    parser = argparse.ArgumentParser(
        description="Data Dictionary Revisions CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # init-db
    subparsers.add_parser("init-db", help="Initialize the database")

    # create-project
    project_parser = subparsers.add_parser("create-project", help="Create a project")
    project_parser.add_argument("title", help="Project title")

    # add-user
    user_parser = subparsers.add_parser("add-user", help="Add a user")
    user_parser.add_argument("username")
    user_parser.add_argument("--first-name")
    user_parser.add_argument("--last-name")

    # load-dictionary
    load_parser = subparsers.add_parser("load-dictionary", help="Replace a project's current data dictionary")
    load_parser.add_argument("project_id", type=int)
    load_parser.add_argument("file", help="Data dictionary CSV or JSON file")

    # move-to-production
    prod_parser = subparsers.add_parser("move-to-production", help="Move a project to production")
    prod_parser.add_argument("project_id", type=int)
    prod_parser.add_argument("--user", help="Username of who moved the project")

    # commit-revision
    commit_parser = subparsers.add_parser("commit-revision", help="Approve a production revision")
    commit_parser.add_argument("project_id", type=int)
    commit_parser.add_argument("file", help="New data dictionary CSV or JSON file")
    commit_parser.add_argument("--requester", help="Username of the requester")
    commit_parser.add_argument("--approver", help="Username of the approver")
    commit_parser.add_argument("--automatic", action="store_true", help="Approved automatically")

    # revisions
    revisions_parser = subparsers.add_parser("revisions", help="List a project's revisions")
    revisions_parser.add_argument("project_id", type=int)

    # compare
    compare_parser = subparsers.add_parser("compare", help="Compare two data dictionary files")
    compare_parser.add_argument("newer", help="Newer data dictionary file")
    compare_parser.add_argument("older", help="Older data dictionary file")

    # diff
    diff_parser = subparsers.add_parser("diff", help="Compare two revisions of a project")
    diff_parser.add_argument("project_id", type=int)
    diff_parser.add_argument("revision_one", help='Revision id or "current"')
    diff_parser.add_argument("revision_two", help='Revision id or "current"')

    # export
    export_parser = subparsers.add_parser("export", help="Export a revision comparison")
    export_parser.add_argument("project_id", type=int)
    export_parser.add_argument("revision_one", help='Revision id or "current"')
    export_parser.add_argument("revision_two", help='Revision id or "current"')
    export_parser.add_argument("--format", dest="fmt", choices=["xlsx", "csv", "pdf", "html"], default="xlsx")
    export_parser.add_argument("--output", "-o", help="Output file path")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.add_argument("--workers", type=int, default=1, help="Number of worker processes")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    from services import RevisionError

    try:
        if args.command == "init-db":
            init_db()
        elif args.command == "create-project":
            create_project(args.title)
        elif args.command == "add-user":
            add_user(args.username, args.first_name, args.last_name)
        elif args.command == "load-dictionary":
            load_dictionary(args.project_id, args.file)
        elif args.command == "move-to-production":
            move_to_production(args.project_id, args.user)
        elif args.command == "commit-revision":
            commit_revision(args.project_id, args.file, args.requester, args.approver, args.automatic)
        elif args.command == "revisions":
            list_revisions(args.project_id)
        elif args.command == "compare":
            compare_files(args.newer, args.older)
        elif args.command == "diff":
            diff_revisions(args.project_id, args.revision_one, args.revision_two)
        elif args.command == "export":
            export_comparison(args.project_id, args.revision_one, args.revision_two, args.fmt, args.output)
        elif args.command == "serve":
            run_server(args.host, args.port, args.reload, args.workers)
    except (RevisionError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
