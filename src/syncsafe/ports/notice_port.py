from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class NoticePort(Protocol):
    def notify(self, message: str) -> None:
        """Show a short status message."""
