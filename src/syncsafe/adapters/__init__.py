from .local_vault_adapter import LocalVaultAdapter
from .logging_notice_adapter import LoggingNoticeAdapter
from .sqlite_settings_storage import SQLiteSettingsStorage

__all__ = ["LocalVaultAdapter", "LoggingNoticeAdapter", "SQLiteSettingsStorage"]
