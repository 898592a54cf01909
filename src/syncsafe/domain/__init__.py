from .models import (
    BatchRenameSummary,
    FileKind,
    RenamePlanEntry,
    RenameReportRow,
    RenameResult,
    RenameStatus,
    SyncSafeSettings,
    VaultFile,
)
from .rename_logic import check_targets, files_to_rename, plan_renames, safe_path
from .safe_name import allowed_characters, get_safe_name, is_safe_name

__all__ = [
    "BatchRenameSummary",
    "FileKind",
    "RenamePlanEntry",
    "RenameReportRow",
    "RenameResult",
    "RenameStatus",
    "SyncSafeSettings",
    "VaultFile",
    "allowed_characters",
    "check_targets",
    "files_to_rename",
    "get_safe_name",
    "is_safe_name",
    "plan_renames",
    "safe_path",
]
