from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable

from syncsafe.domain.models import EventRef, VaultEvent, VaultFile


class DestinationExistsError(RuntimeError):
    """Raised by a move when the destination path is already taken."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Destination already exists: {path}")
        self.path = path


@runtime_checkable
class VaultPort(Protocol):
    def list_files(self) -> list[VaultFile]:
        """Return every regular file currently in the vault."""

    def get_file(self, path: str) -> VaultFile | None:
        """Return the file or folder at a vault path, or None if free."""

    def move_file(self, file_ref: VaultFile, new_path: str) -> None:
        """Rename a file without overwriting; raise DestinationExistsError if taken."""

    def process_front_matter(
        self, file_ref: VaultFile, mutate: Callable[[dict[str, Any]], None]
    ) -> None:
        """Read the front matter block, apply `mutate` to it and write it back."""

    def subscribe(self, kind: str, callback: Callable[[VaultEvent], None]) -> EventRef:
        """Register a callback for `create` or `rename` events."""

    def unsubscribe(self, ref: EventRef) -> None:
        """Remove a callback registered with subscribe."""
