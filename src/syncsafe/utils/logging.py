from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path


def setup_logging(level: int | str = logging.INFO, log_path: Path | None = None) -> logging.Logger:
    """Configure console logging for syncsafe, plus a DEBUG file log if a directory is given."""
    logger = logging.getLogger("syncsafe")
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console)

    if log_path is not None:
        log_path.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        file_handler = logging.FileHandler(log_path / f"syncsafe_{timestamp}.log")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)

    return logger
