#!/usr/bin/env python3
"""
paths.py
-------------------
Default locations for habitdiary data.

All paths live below a single data directory:

    DATA_DIR/
    ├── habitdiary.db   # Default diary file
    ├── logs/           # Rotating log files
    └── backups/        # Pre-migration and manual backups

DATA_DIR is ``$HABITDIARY_HOME`` when set, otherwise
``~/.local/share/habitdiary``. Nothing is created at import time.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
from pathlib import Path


def _get_data_dir() -> Path:
    """
    Determine the habitdiary data directory.

    Returns:
        Absolute path of the data directory
    """
    override = os.environ.get("HABITDIARY_HOME")
    if override:
        return Path(override).expanduser().resolve()
    return Path.home() / ".local" / "share" / "habitdiary"


# ----- Data directory -----
DATA_DIR: Path = _get_data_dir()

# --- Database ---
DB_PATH = DATA_DIR / "habitdiary.db"

# --- Logs & backups ---
LOG_DIR = DATA_DIR / "logs"
BACKUP_DIR = DATA_DIR / "backups"
