from __future__ import annotations

from typing import Any

from syncsafe.adapters.local_vault_adapter import LocalVaultAdapter
from syncsafe.adapters.logging_notice_adapter import LoggingNoticeAdapter
from syncsafe.adapters.sqlite_settings_storage import SQLiteSettingsStorage
from syncsafe.domain.models import SyncSafeSettings
from syncsafe.services.auto_rename_service import AutoRenameService
from syncsafe.services.rename_service import RenameService
from syncsafe.services.settings_service import SettingsService
from syncsafe.settings import AUTO_RENAME_DELAY_MS, RENAME_WORKERS


def build_services(vault_path: str, sqlite_path: str) -> dict[str, Any]:
    """Wire the services; automatic renaming starts only once `activate()` is called."""
    vault = LocalVaultAdapter(vault_path)
    storage = SQLiteSettingsStorage(sqlite_path)
    notices = LoggingNoticeAdapter()
    settings = SyncSafeSettings.from_mapping(storage.load_settings())
    rename_service = RenameService(vault, settings, max_workers=RENAME_WORKERS)
    auto_rename_service = AutoRenameService(
        rename_service,
        vault,
        notices,
        delay_seconds=AUTO_RENAME_DELAY_MS / 1000,
    )
    settings_service = SettingsService(storage, rename_service, auto_rename_service)
    return {
        "rename_service": rename_service,
        "auto_rename_service": auto_rename_service,
        "settings_service": settings_service,
        "notices": notices,
        "storage": storage,
        "vault": vault,
    }
