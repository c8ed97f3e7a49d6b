"""
HTML rendering of revision comparisons.

Produces the details list, colour key and table of changes, and the
revision history page used to pick two revisions.
"""
from html import escape
from typing import Optional, Sequence
from urllib.parse import urlencode

from config import settings
from core import ComparisonResult, Summary
from reporters.base import row_cells, row_color, SUMMARY_LABELS


PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{title}</title>
    <style>
        body {{ font-family: system-ui, sans-serif; margin: 20px; }}
        table {{ border-collapse: collapse; }}
        table, th, td {{ border: 1px solid black; }}
        th, td {{ padding: 5px; vertical-align: top; }}
        th {{ background-color: lightgrey; }}
        .row {{ display: flex; flex-wrap: wrap; gap: 40px; margin-bottom: 20px; }}
        .old-value {{ color: #{old_color}; }}
        .error {{ color: #b91c1c; }}
    </style>
</head>
<body>
{body}
</body>
</html>
"""

SELECTION_SCRIPT = """<script>
    document.querySelectorAll("input[name='dictionaries']").forEach(function (box) {
        box.addEventListener("change", function () {
            if (document.querySelectorAll("input[name='dictionaries']:checked").length >= 2) {
                document.getElementById("dictionaries-form").submit();
            }
        });
    });
</script>"""


def render_summary(summary: Summary) -> str:
    """Details regarding changes between versions."""
    styles = {"fields_added": " style='color: green'", "fields_deleted": " style='color: red'"}
    items = "".join(
        f"<li{styles.get(key, '')}>{label}: {getattr(summary, key)}</li>"
        for key, label in SUMMARY_LABELS
    )
    return f"<div><u><b>Details regarding changes between versions</b></u><ul>{items}</ul></div>"


def render_key() -> str:
    """Colour key for the table of changes."""
    return (
        "<table><tbody>"
        "<tr><td style='background-color: black; color: white; font-weight: bold;'>"
        "KEY for Comparison Table below</td></tr>"
        "<tr><td>White cell = no change</td></tr>"
        f"<tr><td style='background-color: #{settings.CHANGED_COLOR}'>Yellow cell = field changed "
        f"(Black text = current value, <span class='old-value'>Gray text = old value</span>)</td></tr>"
        f"<tr><td style='background-color: #{settings.ADDED_COLOR}'>Green cell = new project field</td></tr>"
        f"<tr><td style='background-color: #{settings.DELETED_COLOR}'>Red cell = deleted project field</td></tr>"
        "</tbody></table>"
    )


def render_changes_table(result: ComparisonResult, download_links: Optional[dict] = None) -> str:
    """
    Table of changes.

    Args:
        result: The comparison to render
        download_links: Optional mapping of link text -> URL shown next to the heading
    """
    if result.is_identical:
        return "<h4>Table of Changes</h4><p>The data dictionaries are identical</p>"

    links = ""
    if download_links:
        links = " ".join(
            f"<a href='{escape(url, quote=True)}'>{escape(text)}</a>"
            for text, url in download_links.items()
        )
    header_cells = "".join(f"<th><b>{escape(h)}</b></th>" for h in result.change_set.headers)

    rows = []
    for entry in result.change_set:
        color = row_color(entry)
        row_style = f" style='background-color:#{color}'" if color else ""
        cells = []
        for cell in row_cells(entry):
            if cell.changed:
                cells.append(
                    f"<td style='background-color:#{settings.CHANGED_COLOR}'>"
                    f"<p>{escape(cell.value)}</p>"
                    f"<p class='old-value'>{escape(cell.old_value)}</p></td>"
                )
            else:
                cells.append(f"<td>{escape(cell.value)}</td>")
        rows.append(f"<tr{row_style} data-status='{entry.status.value}'>{''.join(cells)}</tr>")

    return (
        f"<h4>Table of Changes {links}</h4>"
        f"<table><thead><tr>{header_cells}</tr></thead>"
        f"<tbody>{''.join(rows)}</tbody></table>"
    )


def render_comparison(
    result: ComparisonResult,
    newer_label: Optional[str] = None,
    older_label: Optional[str] = None,
    download_base: Optional[str] = None
) -> str:
    """Details, key and table of changes for one comparison, as an HTML fragment."""
    parts = []
    if newer_label and older_label:
        parts.append(
            f"<h4>Comparing <u><b>{escape(newer_label)}</b></u> "
            f"to <u><b>{escape(older_label)}</b></u></h4>"
        )

    download_links = None
    if download_base:
        query = urlencode({
            "revision_one": result.newer_revision,
            "revision_two": result.older_revision
        })
        download_links = {
            fmt.upper(): f"{download_base}/{fmt}?{query}" for fmt in ("xlsx", "csv", "pdf")
        }

    parts.append(f"<div class='row'>{render_summary(result.summary)}{render_key()}</div>")
    parts.append(render_changes_table(result, download_links))
    return "\n".join(parts)


def _approval_text(revision, is_oldest: bool) -> str:
    if is_oldest:
        return f"<p>Moved to production by <b>{escape(revision.approver)}</b></p>"
    requested = f"<p>Requested by <b>{escape(revision.requester)}</b></p>"
    if revision.automatic_approval:
        return f"{requested}<p>Approved automatically</p>"
    return f"{requested}<p>Approved by <b>{escape(revision.approver)}</b></p>"


def render_revision_history(revisions: Sequence, selected: Sequence[str] = ()) -> str:
    """Project revision history with a checkbox per revision."""
    rows = []
    for index, revision in enumerate(revisions):
        checked = " checked" if revision.id in selected else ""
        label = escape(revision.label)
        if revision.is_current:
            label = f"<b>{label}</b>"
        ts = revision.ts_approved.strftime("%Y-%m-%d %H:%M:%S") if revision.ts_approved else ""
        rows.append(
            "<tr>"
            f"<td><input type='checkbox' name='dictionaries' value='{escape(revision.id, quote=True)}'{checked}></td>"
            f"<td>{label}</td><td>{ts}</td>"
            f"<td>{_approval_text(revision, index == len(revisions) - 1)}</td>"
            "</tr>"
        )
    return (
        "<form method='get' id='dictionaries-form'>"
        "<table style='margin-bottom:20px'>"
        "<thead><tr><th colspan='4'><b>Project Revision History</b></th></tr></thead>"
        f"<tbody>{''.join(rows)}</tbody></table>"
        "<noscript><button type='submit'>Compare</button></noscript>"
        "</form>"
    )


def render_revisions_page(
    project_title: str,
    revisions: Sequence,
    comparison_html: Optional[str] = None,
    selected: Sequence[str] = (),
    error: Optional[str] = None
) -> str:
    """Full page: revision history, then the comparison when two were selected."""
    body = [f"<h3>{escape(project_title)}</h3>", "<h4>Data Dictionary Revisions</h4>"]

    if len(revisions) < 2:
        body.append("<p>There must be at least two revisions of the data dictionary to use this page.</p>")
    else:
        body.append(
            "<p>The table contains all production revisions of the data dictionary for this project. "
            "When two revisions are selected, then data comparing them to each other will display.</p>"
            "<p><b>Select two data dictionary revisions to compare:</b></p>"
        )
        body.append(render_revision_history(revisions, selected))
        if error:
            body.append(f"<p class='error'>{escape(error)}</p>")
        if comparison_html:
            body.append(comparison_html)
        body.append(SELECTION_SCRIPT)

    return PAGE_TEMPLATE.format(
        title=escape(f"{project_title} - {settings.APP_NAME}"),
        old_color=settings.OLD_VALUE_COLOR,
        body="\n".join(body)
    )
