from __future__ import annotations

from .models import BatchRenameSummary, RenameResult, RenameStatus

NO_ACTIVE_FILE_MESSAGE = "Could not find an active file to rename."


def batch_notice(summary: BatchRenameSummary) -> str:
    if summary.failures == 0:
        return f"Successfully renamed {summary.successes} file(s)."
    return (
        f"Failed to rename {summary.failures} file(s). "
        f"Successfully renamed {summary.successes} file(s)."
    )


def single_file_notice(result: RenameResult) -> str:
    if result.status is RenameStatus.ALREADY_SAFE:
        return "File name was already sync-safe."
    if result.status is RenameStatus.RENAMED:
        return "Renamed file to be sync-safe."
    if result.status is RenameStatus.ALREADY_EXISTS:
        return (
            f'Could not rename file to "{result.safe_name}" because that file already exists.'
        )
    return (
        f'Could not rename file to "{result.safe_name}" because of an error: {result.message}'
    )


def silent_notice(result: RenameResult) -> str | None:
    """Notice for automatic renames; already-safe files stay quiet."""
    if result.status is RenameStatus.ALREADY_SAFE:
        return None
    if result.status is RenameStatus.RENAMED:
        return "Renamed file to make it sync-safe."
    if result.status is RenameStatus.ALREADY_EXISTS:
        return (
            f'Sync-safe: Could not rename to "{result.safe_name}" '
            "because that file already exists."
        )
    return (
        f'Sync-safe: Could not rename to "{result.safe_name}" '
        f"because of an error: {result.message}"
    )
