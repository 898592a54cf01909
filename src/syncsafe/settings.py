from __future__ import annotations

import os

SYNCSAFE_VAULT_PATH = os.getenv("SYNCSAFE_VAULT_PATH", ".")
SQLITE_PATH = os.getenv("SQLITE_PATH", "./syncsafe.db")
RENAME_WORKERS = max(1, int(os.getenv("RENAME_WORKERS", "8")))
AUTO_RENAME_DELAY_MS = max(0, int(os.getenv("AUTO_RENAME_DELAY_MS", "100")))
WATCH_INTERVAL_SECONDS = float(os.getenv("WATCH_INTERVAL_SECONDS", "1.0"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_PATH = os.getenv("LOG_PATH", "")
