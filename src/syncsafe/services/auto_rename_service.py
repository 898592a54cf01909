from __future__ import annotations

import logging
import threading

from syncsafe.domain.models import EventRef, SyncSafeSettings, VaultEvent, VaultFile
from syncsafe.domain.notices import silent_notice
from syncsafe.ports.notice_port import NoticePort
from syncsafe.ports.vault_port import VaultPort
from syncsafe.services.rename_service import RenameService
from syncsafe.settings import AUTO_RENAME_DELAY_MS

logger = logging.getLogger(__name__)


class AutoRenameService:
    """
    Renames files as the vault reports them created or renamed.

    Subscriptions exist only while enabled. Created files are handled after
    `delay_seconds` so the writer can finish first; this is a best-effort
    settle time, not a guarantee.
    """

    def __init__(
        self,
        rename_service: RenameService,
        vault: VaultPort,
        notices: NoticePort,
        delay_seconds: float = AUTO_RENAME_DELAY_MS / 1000,
    ) -> None:
        self._rename_service = rename_service
        self._vault = vault
        self._notices = notices
        self._delay_seconds = delay_seconds
        self._refs: list[EventRef] = []
        self._timers: set[threading.Timer] = set()
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return bool(self._refs)

    def enable(self) -> None:
        with self._lock:
            if self._refs:
                return
            self._refs = [
                self._vault.subscribe("create", self.on_create),
                self._vault.subscribe("rename", self.on_rename),
            ]
        logger.debug("Automatic renaming enabled")

    def disable(self) -> None:
        with self._lock:
            refs, self._refs = self._refs, []
            timers, self._timers = self._timers, set()
        for ref in refs:
            self._vault.unsubscribe(ref)
        for timer in timers:
            timer.cancel()
        if refs:
            logger.debug("Automatic renaming disabled")

    def apply_settings(self, settings: SyncSafeSettings) -> None:
        if settings.rename_automatically:
            self.enable()
        else:
            self.disable()

    def on_create(self, event: VaultEvent) -> None:
        if not event.file.is_file:
            return
        timer = threading.Timer(self._delay_seconds, self._run_deferred, args=(event.file,))
        timer.daemon = True
        with self._lock:
            self._timers.add(timer)
        timer.start()

    def on_rename(self, event: VaultEvent) -> None:
        if not event.file.is_file:
            return
        self.rename_silently(event.file)

    def rename_silently(self, file_ref: VaultFile) -> None:
        result = self._rename_service.rename_single_file(file_ref)
        message = silent_notice(result)
        if message is not None:
            self._notices.notify(message)

    def _run_deferred(self, file_ref: VaultFile) -> None:
        with self._lock:
            self._timers = {timer for timer in self._timers if timer.is_alive()}
        self.rename_silently(file_ref)
