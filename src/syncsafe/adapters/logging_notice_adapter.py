from __future__ import annotations

import logging
import threading

from syncsafe.ports.notice_port import NoticePort

logger = logging.getLogger(__name__)


class LoggingNoticeAdapter(NoticePort):
    def __init__(self) -> None:
        self._messages: list[str] = []
        self._lock = threading.Lock()

    def notify(self, message: str) -> None:
        logger.info(message)
        with self._lock:
            self._messages.append(message)

    @property
    def messages(self) -> list[str]:
        with self._lock:
            return list(self._messages)

    def drain(self) -> list[str]:
        with self._lock:
            drained, self._messages = self._messages, []
        return drained
