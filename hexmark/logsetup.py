"""Logging setup.

The editor owns the terminal while it runs, so log records go to a file in
the user log directory instead of stderr.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import platformdirs

from .constants import EditorConstants

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LEVEL_ENV_VAR = "HEXMARK_LOG_LEVEL"


def default_log_path() -> Path:
    return Path(platformdirs.user_log_dir(EditorConstants.APP_NAME)) / EditorConstants.LOG_FILENAME


def resolve_level(level: Optional[str] = None) -> int:
    name = (level or os.environ.get(LEVEL_ENV_VAR) or "WARNING").upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.WARNING


def configure_logging(level: Optional[str] = None, log_path: Optional[Path] = None) -> logging.Handler:
    """Attach a handler to the ``hexmark`` logger and return it.

    Falls back to a NullHandler when the log file cannot be created.
    """
    root = logging.getLogger(EditorConstants.APP_NAME)
    root.setLevel(resolve_level(level))
    path = Path(log_path) if log_path is not None else default_log_path()
    handler: logging.Handler
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding='utf-8')
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    except OSError:
        handler = logging.NullHandler()
    root.addHandler(handler)
    return handler
