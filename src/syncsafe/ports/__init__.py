from .notice_port import NoticePort
from .settings_storage_port import SettingsStoragePort
from .vault_port import DestinationExistsError, VaultPort

__all__ = ["DestinationExistsError", "NoticePort", "SettingsStoragePort", "VaultPort"]
