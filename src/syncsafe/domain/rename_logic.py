from __future__ import annotations

from typing import Callable, Iterable

from .models import RenamePlanEntry, RenameReportRow, VaultFile
from .safe_name import get_safe_name


def plan_entry(file_ref: VaultFile, additional: str) -> RenamePlanEntry:
    safe_name = get_safe_name(file_ref.name, additional)
    return RenamePlanEntry(
        file=file_ref, safe_name=safe_name, already_safe=safe_name == file_ref.name
    )


def plan_renames(files: Iterable[VaultFile], additional: str) -> list[RenamePlanEntry]:
    """
    Evaluate every file against the allow-list, safe ones included.

    Example:
        files = [VaultFile("ok.md"), VaultFile("bad?.md")]
        plan_renames(files, "")
        # [RenamePlanEntry(..., safe_name='ok.md', already_safe=True),
        #  RenamePlanEntry(..., safe_name='bad-.md', already_safe=False)]
    """
    return [plan_entry(file_ref, additional) for file_ref in files]


def files_to_rename(files: Iterable[VaultFile], additional: str) -> list[RenamePlanEntry]:
    return [entry for entry in plan_renames(files, additional) if not entry.already_safe]


def safe_path(file_ref: VaultFile, safe_name: str) -> list[str]:
    segments = [part for part in file_ref.parent_path if part]
    segments.append(safe_name)
    return segments


def join_path(segments: Iterable[str]) -> str:
    return "/".join(segments)


def check_targets(
    entries: Iterable[RenamePlanEntry],
    lookup: Callable[[str], VaultFile | None],
) -> list[RenameReportRow]:
    """
    Resolve each entry's target path and flag targets held by another entry.

    Rows come back ordered by source path so reports are stable.
    """
    ordered = sorted(entries, key=lambda entry: (entry.file.path.casefold(), entry.file.path))
    rows: list[RenameReportRow] = []
    for entry in ordered:
        target_path = join_path(safe_path(entry.file, entry.safe_name))
        occupant = lookup(target_path)
        available = occupant is None or occupant.path == entry.file.path
        rows.append(
            RenameReportRow(entry=entry, target_path=target_path, target_available=available)
        )
    return rows
