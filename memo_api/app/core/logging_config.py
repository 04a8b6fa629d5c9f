"""
Logging configuration for the Memo Board API.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger once per process.  Libraries that log every
connection or multipart chunk are held at INFO or above even when the
service itself runs at DEBUG, so the debug output stays about accounts,
sessions and memos.
"""

import logging
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Chatty third-party loggers and the lowest level they may emit at.
QUIET_LOGGERS = {
    "urllib3": logging.INFO,
    "multipart": logging.INFO,
    "httpx": logging.WARNING,
}


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path of an additional log file, resolved relative to the current
        working directory.
    """
    root = logging.getLogger()
    if root.handlers:
        # Already configured, e.g. by pytest or a second create_app call.
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name, floor in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(numeric_level, floor))
