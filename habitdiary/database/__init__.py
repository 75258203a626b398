#!/usr/bin/env python3
"""
habitdiary Database Package
---------------------------
Persistent, versioned diary store and its statistics.

This package provides:
- Diary: one open diary file (categories, entries, schema upgrades)
- Aggregator: period comparisons and composition rankings
- ExportManager: legacy CSV import and export
- generate_diary: synthetic data for demos and load tests

Usage:
    from habitdiary.database import Aggregator, open_diary

    with open_diary("~/habits.db") as diary:
        summaries = Aggregator(diary).compare_periods(30, 2)
"""

from .manager import Diary, create_diary, open_diary
from habitdiary.core.exceptions import (
    BackupError,
    CategoryNotFound,
    CreateError,
    DatabaseError,
    DuplicateCategory,
    ExchangeError,
    MigrationError,
    MigrationFailed,
    OpenError,
    UnknownCategory,
    UnsupportedVersion,
    ValidationError,
)
from .aggregator import Aggregator
from .export_manager import ExportManager
from .generator import generate_diary
from .migrator import CURRENT_SCHEMA_VERSION, SchemaMigrator
from .decorators import (
    log_database_operation,
    handle_db_errors,
)

__all__ = [
    # Main manager
    "Diary",
    "open_diary",
    "create_diary",
    # Exceptions
    "DatabaseError",
    "OpenError",
    "CreateError",
    "MigrationError",
    "UnsupportedVersion",
    "MigrationFailed",
    "BackupError",
    "ExchangeError",
    "ValidationError",
    "DuplicateCategory",
    "CategoryNotFound",
    "UnknownCategory",
    # Core modules
    "Aggregator",
    "ExportManager",
    "generate_diary",
    "SchemaMigrator",
    "CURRENT_SCHEMA_VERSION",
    # Decorators
    "log_database_operation",
    "handle_db_errors",
]
