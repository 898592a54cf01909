from __future__ import annotations

from dataclasses import replace
from typing import Any

from syncsafe.domain.models import SyncSafeSettings
from syncsafe.ports.settings_storage_port import SettingsStoragePort
from syncsafe.services.auto_rename_service import AutoRenameService
from syncsafe.services.rename_service import RenameService


class SettingsService:
    def __init__(
        self,
        storage: SettingsStoragePort,
        rename_service: RenameService,
        auto_rename: AutoRenameService,
    ) -> None:
        self._storage = storage
        self._rename_service = rename_service
        self._auto_rename = auto_rename

    def load(self) -> SyncSafeSettings:
        return SyncSafeSettings.from_mapping(self._storage.load_settings())

    def activate(self) -> SyncSafeSettings:
        settings = self.load()
        self._apply(settings)
        return settings

    def update(self, **changes: Any) -> SyncSafeSettings:
        unknown = set(changes) - set(SyncSafeSettings.option_names())
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
        _check_types(changes)
        settings = replace(self.load(), **changes)
        self._storage.save_settings(settings.to_mapping())
        self._apply(settings)
        return settings

    def _apply(self, settings: SyncSafeSettings) -> None:
        self._rename_service.update_settings(settings)
        self._auto_rename.apply_settings(settings)


def _check_types(changes: dict[str, Any]) -> None:
    for name in ("rename_automatically", "add_original_alias"):
        if name in changes and not isinstance(changes[name], bool):
            raise ValueError(f"{name} must be a boolean")
    if "additional_characters" in changes and not isinstance(
        changes["additional_characters"], str
    ):
        raise ValueError("additional_characters must be a string")
