from __future__ import annotations

from .models import RenameReportRow

ALL_SAFE_MESSAGE = "All files are already sync-safe."
_TABLE_HEADING = (
    "| Current path| Current name | Safe name | Rename possible |\n|---|---|---|---|"
)


def render_rename_report(rows: list[RenameReportRow]) -> str:
    """
    Render the Markdown table of files that still need a sync-safe name.

    Example output:
        1 files should be renamed to be sync-safe:

        | Current path| Current name | Safe name | Rename possible |
        |---|---|---|---|
        | [[notes/bad?.md]] | bad?.md | bad-.md | Yes |
    """
    if not rows:
        return ALL_SAFE_MESSAGE
    lines = [_render_row(row) for row in rows]
    return (
        f"{len(rows)} files should be renamed to be sync-safe:\n\n"
        f"{_TABLE_HEADING}\n" + "\n".join(lines)
    )


def _render_row(row: RenameReportRow) -> str:
    file_ref = row.entry.file
    if row.target_available:
        possible = "Yes"
    else:
        possible = f"No, already exists: [[{row.target_path}]]"
    return f"| [[{file_ref.path}]] | {file_ref.name} | {row.entry.safe_name} | {possible} |"
