#!/usr/bin/env python3
"""
backup_manager.py
--------------------
Diary file backups.

Copies are taken with the SQLite online backup API so a consistent
snapshot is produced even while the diary is open. The diary takes a
``pre_migration`` backup automatically before upgrading an old file when a
backup directory is configured; ``manual`` backups are taken on request.

Usage:
    from habitdiary.core.backup_manager import BackupManager

    manager = BackupManager(DB_PATH, BACKUP_DIR)
    backup_path = manager.create_backup("manual")
    backups = manager.list_backups()
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

# --- Local imports ---
from .exceptions import BackupError
from .logging_manager import DiaryLogger, safe_logger

VALID_BACKUP_TYPES = {"manual", "pre_migration"}
"""Valid backup type identifiers; each gets its own subdirectory."""


class BackupManager:
    """
    Creates and lists timestamped copies of one diary file.

    Attributes:
        db_path: Diary file being backed up
        backup_dir: Root directory of the backups
        logger: Optional logger for backup operations
    """

    def __init__(
        self,
        db_path: Path,
        backup_dir: Path,
        logger: Optional[DiaryLogger] = None,
    ) -> None:
        self.db_path = Path(db_path)
        self.backup_dir = Path(backup_dir)
        self.logger = logger

    @staticmethod
    def _copy_database(source_path: Path, dest_path: Path) -> None:
        """
        Copy a database with the SQLite backup API.

        Raises:
            sqlite3.Error: If either file cannot be opened or copied
        """
        source = sqlite3.connect(str(source_path))
        try:
            dest = sqlite3.connect(str(dest_path))
            try:
                with dest:
                    source.backup(dest)
            finally:
                dest.close()
        finally:
            source.close()

    def create_backup(
        self, backup_type: str = "manual", suffix: Optional[str] = None
    ) -> Path:
        """
        Create a timestamped backup of the diary file.

        Args:
            backup_type: One of VALID_BACKUP_TYPES
            suffix: Optional suffix for the backup filename

        Returns:
            Path to the created backup file

        Raises:
            BackupError: If backup_type is invalid, the diary is missing,
                or the copy fails
        """
        if backup_type not in VALID_BACKUP_TYPES:
            valid_types = ", ".join(sorted(VALID_BACKUP_TYPES))
            raise BackupError(
                f"Invalid backup_type '{backup_type}'. Must be one of: {valid_types}"
            )

        if not self.db_path.exists():
            raise BackupError(f"Diary file not found: {self.db_path}")

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        name = f"{self.db_path.stem}_{timestamp}"
        if suffix:
            name = f"{name}_{suffix}"
        backup_path = self.backup_dir / backup_type / f"{name}.db"

        try:
            backup_path.parent.mkdir(parents=True, exist_ok=True)
            self._copy_database(self.db_path, backup_path)
        except (OSError, sqlite3.Error) as e:
            safe_logger(self.logger).log_error(
                e,
                {
                    "operation": "create_backup",
                    "backup_type": backup_type,
                    "target_path": str(backup_path),
                },
            )
            raise BackupError(f"Failed to create backup: {e}") from e

        safe_logger(self.logger).log_operation(
            "backup_created",
            {
                "backup_type": backup_type,
                "backup_path": str(backup_path),
                "backup_size": backup_path.stat().st_size,
            },
        )
        return backup_path

    def list_backups(self) -> Dict[str, List[Dict[str, Any]]]:
        """
        List available backups, oldest first, grouped by type.

        Returns:
            Dictionary mapping backup types to lists of backup info
        """
        backups: Dict[str, List[Dict[str, Any]]] = {
            backup_type: [] for backup_type in sorted(VALID_BACKUP_TYPES)
        }
        for backup_type, items in backups.items():
            type_dir = self.backup_dir / backup_type
            if not type_dir.exists():
                continue
            for backup_file in sorted(type_dir.glob("*.db")):
                stat = backup_file.stat()
                items.append(
                    {
                        "name": backup_file.name,
                        "path": str(backup_file),
                        "size": stat.st_size,
                        "created": datetime.fromtimestamp(stat.st_mtime).isoformat(),
                    }
                )
        return backups
