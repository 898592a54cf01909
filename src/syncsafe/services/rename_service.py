from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any

from syncsafe.domain.models import (
    BatchRenameSummary,
    RenamePlanEntry,
    RenameReportRow,
    RenameResult,
    RenameStatus,
    SyncSafeSettings,
    VaultFile,
)
from syncsafe.domain.rename_logic import (
    check_targets,
    files_to_rename,
    join_path,
    plan_entry,
    plan_renames,
    safe_path,
)
from syncsafe.domain.report_rendering import render_rename_report
from syncsafe.ports.vault_port import DestinationExistsError, VaultPort
from syncsafe.settings import RENAME_WORKERS

logger = logging.getLogger(__name__)

ALIASES_KEY = "aliases"


class RenameService:
    def __init__(
        self,
        vault: VaultPort,
        settings: SyncSafeSettings,
        max_workers: int = RENAME_WORKERS,
    ) -> None:
        self._vault = vault
        self._settings = settings
        self._max_workers = max_workers

    @property
    def settings(self) -> SyncSafeSettings:
        return self._settings

    def update_settings(self, settings: SyncSafeSettings) -> None:
        self._settings = settings

    def plan_all(self) -> list[RenamePlanEntry]:
        return plan_renames(self._vault.list_files(), self._settings.additional_characters)

    def get_files_to_rename(self) -> list[RenamePlanEntry]:
        return files_to_rename(self._vault.list_files(), self._settings.additional_characters)

    def build_report_rows(self) -> list[RenameReportRow]:
        return check_targets(self.get_files_to_rename(), self._vault.get_file)

    def generate_report(self) -> str:
        return render_rename_report(self.build_report_rows())

    def rename_all_files(self) -> BatchRenameSummary:
        """
        Move every unsafe file to its safe name concurrently.

        Renames are independent; a failure neither stops the others nor rolls
        back the ones that already went through.
        """
        entries = self.get_files_to_rename()
        summary = BatchRenameSummary()
        if not entries:
            return summary

        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = [executor.submit(self._move_entry, entry) for entry in entries]
            for future in as_completed(futures):
                summary.results.append(future.result())

        logger.info(
            "Batch rename finished: %d succeeded, %d failed",
            summary.successes,
            summary.failures,
        )
        return summary

    def rename_single_file(self, file_ref: VaultFile) -> RenameResult:
        entry = plan_entry(file_ref, self._settings.additional_characters)
        if entry.already_safe:
            return RenameResult(
                status=RenameStatus.ALREADY_SAFE,
                previous_name=file_ref.name,
                safe_name=entry.safe_name,
            )

        # Alias goes in before the move and is kept if the move fails.
        if self._settings.rename_automatically and _supports_aliases(file_ref):
            try:
                self._set_alias(file_ref, file_ref.basename)
            except RuntimeError as exc:
                return RenameResult(
                    status=RenameStatus.FAILED,
                    previous_name=file_ref.name,
                    safe_name=entry.safe_name,
                    message=str(exc),
                )
        return self._move_entry(entry)

    def _move_entry(self, entry: RenamePlanEntry) -> RenameResult:
        file_ref = entry.file
        new_path = join_path(safe_path(file_ref, entry.safe_name))
        try:
            self._vault.move_file(file_ref, new_path)
        except DestinationExistsError as exc:
            logger.warning("Cannot rename %s: %s", file_ref.path, exc)
            return RenameResult(
                status=RenameStatus.ALREADY_EXISTS,
                previous_name=file_ref.name,
                safe_name=entry.safe_name,
                message=str(exc),
            )
        except (RuntimeError, OSError) as exc:
            logger.warning("Failed to rename %s: %s", file_ref.path, exc)
            return RenameResult(
                status=RenameStatus.FAILED,
                previous_name=file_ref.name,
                safe_name=entry.safe_name,
                message=str(exc),
            )
        return RenameResult(
            status=RenameStatus.RENAMED,
            previous_name=file_ref.name,
            safe_name=entry.safe_name,
        )

    def _set_alias(self, file_ref: VaultFile, alias: str) -> None:
        def _append_alias(front_matter: dict[str, Any]) -> None:
            aliases = front_matter.get(ALIASES_KEY)
            if aliases is None:
                aliases = []
            elif not isinstance(aliases, list):
                aliases = [aliases]
            aliases.append(alias)
            front_matter[ALIASES_KEY] = aliases

        self._vault.process_front_matter(file_ref, _append_alias)


def _supports_aliases(file_ref: VaultFile) -> bool:
    return file_ref.is_file and file_ref.extension.lower() == "md"
