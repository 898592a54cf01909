from .auto_rename_service import AutoRenameService
from .rename_service import RenameService
from .settings_service import SettingsService

__all__ = ["AutoRenameService", "RenameService", "SettingsService"]
