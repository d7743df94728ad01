"""
Logging setup: console plus a daily rotating file (`logs/cityinfo.txt`).
"""

from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from .settings import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    root = logging.getLogger()
    if getattr(root, "_cityinfo_configured", False):
        return None

    formatter = logging.Formatter(LOG_FORMAT)
    root.setLevel(settings.log_level)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = TimedRotatingFileHandler(
        log_dir / "cityinfo.txt",
        when="midnight",
        backupCount=31,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    root._cityinfo_configured = True  # type: ignore[attr-defined]
