from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Mapping

DEFAULT_ADDITIONAL_CHARACTERS = "&+'(),$€ÄäÖöÜüßÀàÉéÈèÇçÂâÊêËëÏïÎîÔôŒœÆæ"


class FileKind(str, Enum):
    FILE = "file"
    FOLDER = "folder"


@dataclass(frozen=True)
class VaultFile:
    name: str
    parent_path: tuple[str, ...] = ()
    kind: FileKind = FileKind.FILE

    @property
    def path(self) -> str:
        return "/".join([*self.parent_path, self.name])

    @property
    def basename(self) -> str:
        base, dot, _ = self.name.rpartition(".")
        if dot == "" or base == "" or self.kind is FileKind.FOLDER:
            return self.name
        return base

    @property
    def extension(self) -> str:
        base, dot, ext = self.name.rpartition(".")
        if dot == "" or base == "" or self.kind is FileKind.FOLDER:
            return ""
        return ext

    @property
    def is_file(self) -> bool:
        return self.kind is FileKind.FILE

    @classmethod
    def from_path(cls, path: str, kind: FileKind = FileKind.FILE) -> VaultFile:
        segments = [part for part in path.split("/") if part]
        if not segments:
            raise ValueError(f"Empty vault path: {path!r}")
        return cls(name=segments[-1], parent_path=tuple(segments[:-1]), kind=kind)


@dataclass(frozen=True)
class RenamePlanEntry:
    file: VaultFile
    safe_name: str
    already_safe: bool


@dataclass(frozen=True)
class RenameReportRow:
    entry: RenamePlanEntry
    target_path: str
    target_available: bool


class RenameStatus(str, Enum):
    ALREADY_SAFE = "already_safe"
    RENAMED = "renamed"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"


@dataclass
class RenameResult:
    status: RenameStatus
    previous_name: str
    safe_name: str
    message: str | None = None

    @property
    def success(self) -> bool:
        return self.status in (RenameStatus.ALREADY_SAFE, RenameStatus.RENAMED)

    @property
    def already_safe(self) -> bool:
        return self.status is RenameStatus.ALREADY_SAFE


@dataclass
class BatchRenameSummary:
    results: list[RenameResult] = field(default_factory=list)

    @property
    def successes(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def failures(self) -> int:
        return sum(1 for result in self.results if not result.success)


@dataclass(frozen=True)
class SyncSafeSettings:
    rename_automatically: bool = True
    add_original_alias: bool = True
    additional_characters: str = DEFAULT_ADDITIONAL_CHARACTERS

    @classmethod
    def option_names(cls) -> tuple[str, ...]:
        return tuple(item.name for item in fields(cls))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> SyncSafeSettings:
        """Overlay stored options on the defaults, ignoring unknown keys."""
        if not data:
            return cls()
        known = set(cls.option_names())
        return cls(**{key: value for key, value in data.items() if key in known})

    def to_mapping(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.option_names()}


@dataclass(frozen=True)
class VaultEvent:
    kind: str
    file: VaultFile
    old_path: str | None = None


@dataclass(frozen=True)
class EventRef:
    ref_id: int
    kind: str
