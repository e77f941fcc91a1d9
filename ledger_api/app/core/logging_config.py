"""
Logging setup for the ledger.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger once, then applies per-logger levels such
as ``{"ledger_api.app.services": "DEBUG"}``.  The levels come from the
``LOG_LEVELS`` setting.
"""

import logging
from pathlib import Path
from typing import Mapping, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    levels: Optional[Mapping[str, str]] = None,
) -> None:
    """Configure the root logger and named logger levels.

    Parameters
    ----------
    level : str
        Root level name (e.g. ``"DEBUG"``).  Case insensitive; unknown
        names fall back to ``INFO``.
    logfile : Optional[str]
        Path to a file that receives the same records as the console.
    levels : Optional[Mapping[str, str]]
        Level names keyed by logger name.  Applied on every call.
    """
    for name, name_level in (levels or {}).items():
        logging.getLogger(name).setLevel(_level(name_level))

    root = logging.getLogger()
    if root.handlers:
        return
    root.setLevel(_level(level))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
