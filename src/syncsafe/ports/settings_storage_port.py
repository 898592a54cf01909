from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SettingsStoragePort(Protocol):
    def load_settings(self) -> dict[str, Any]:
        """Return persisted option values; missing options are omitted."""

    def save_settings(self, values: dict[str, Any]) -> None:
        """Persist option values."""
