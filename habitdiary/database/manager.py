#!/usr/bin/env python3
"""
manager.py
--------------------
Diary manager for the habitdiary engine.

Provides the Diary class, the single consistency boundary around one
diary file. Handles:
    - Creation of new diary files seeded with categories
    - Opening existing files, upgrading old schemas on the way
    - Transaction management (commit on success, rollback on error)
    - Category and entry operations delegated to the modular managers
    - Optional rotating logs and pre-migration backups

Core Operations:
    Category Management:
        - add_category: Append a category, or un-hide a hidden one
        - hide_category: Hide a category, keeping its history
        - list_categories / get_category: Read categories in display order

    Entry Management:
        - upsert_entry / upsert_entries: Replace the flags of one or more days
        - get_entry: Read one day (gaps read as all-false)
        - iter_entries: Lazy, restartable iteration over a Period
        - missing_dates: Days without a stored row
        - date_bounds / recorded_period / is_empty: Recorded range

    Schema:
        - schema_version: Stored version
        - migrate: Apply pending upgrade steps

Notes
==============
- Statistics live in aggregator.Aggregator, which reads through a Diary
- A Diary is passed explicitly; there is no process-wide current diary
- The diary is single-writer; concurrent external edits are undefined
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

# --- Third party ---
from sqlalchemy import Engine, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

# --- Local imports ---
from habitdiary.core.backup_manager import BackupManager
from habitdiary.core.exceptions import (
    CreateError,
    DatabaseError,
    OpenError,
    ValidationError,
)
from habitdiary.core.logging_manager import DiaryLogger, safe_logger
from habitdiary.core.validators import DataValidator
from habitdiary.dataclasses import Category, DiaryEntry, Period
from .engine import create_diary_engine
from .managers import CategoryManager, EntryManager, EntrySequence
from .migrator import CURRENT_SCHEMA_VERSION, SchemaMigrator
from .models import Base, DayEntry, EntryFlag, HabitCategory, SchemaInfo

REQUIRED_TABLES = (
    HabitCategory.__tablename__,
    DayEntry.__tablename__,
    EntryFlag.__tablename__,
)
"""Tables present in every diary file, whatever its schema version."""


def check_diary_tables(engine: Engine, db_path: Path) -> None:
    """
    Verify that a SQLite file holds the diary tables.

    Raises:
        OpenError: If the file is not SQLite or lacks diary tables
    """
    try:
        with engine.connect() as conn:
            inspector = inspect(conn)
            missing = [t for t in REQUIRED_TABLES if not inspector.has_table(t)]
    except SQLAlchemyError as e:
        raise OpenError(f"Not a diary file: {db_path} ({e})") from e
    if missing:
        raise OpenError(
            f"Not a diary file: {db_path} (missing tables: {', '.join(missing)})"
        )


# ----- Diary -----
class Diary:
    """
    An open diary file.

    Use ``Diary.create`` or ``Diary.open`` rather than the constructor.

    Attributes:
        db_path: Resolved path of the diary file
        engine: SQLAlchemy engine (None once closed)
        SessionLocal: Session factory bound to the engine
        logger: Optional DiaryLogger
        backup_manager: Optional BackupManager used before migrations

    Usage:
        with Diary.open("~/habits.db") as diary:
            diary.upsert_entry(date(2024, 1, 10), {"GAM": True})
            entry = diary.get_entry(date(2024, 1, 10))
    """

    # ---- Initialization ----
    def __init__(
        self,
        db_path: Union[str, Path],
        log_dir: Optional[Union[str, Path]] = None,
        backup_dir: Optional[Union[str, Path]] = None,
    ) -> None:
        """
        Prepare paths, logging and backups; does not touch the file.

        Args:
            db_path: Path to the SQLite file
            log_dir: Directory for log files (optional)
            backup_dir: Directory for pre-migration backups (optional)
        """
        self.db_path = Path(db_path).expanduser().resolve()
        self.engine: Optional[Engine] = None
        self.SessionLocal: Optional[sessionmaker] = None

        # --- Logging ---
        if log_dir:
            self.logger: Optional[DiaryLogger] = DiaryLogger(
                Path(log_dir).expanduser().resolve(), component_name="diary"
            )
        else:
            self.logger = None

        # --- Backup system ---
        if backup_dir:
            self.backup_manager: Optional[BackupManager] = BackupManager(
                self.db_path,
                Path(backup_dir).expanduser().resolve(),
                logger=self.logger,
            )
        else:
            self.backup_manager = None

        # Managers are bound inside session_scope
        self._category_manager: Optional[CategoryManager] = None
        self._entry_manager: Optional[EntryManager] = None

    def _setup_engine(self) -> None:
        """Initialize database engine and session factory."""
        self.engine = create_diary_engine(self.db_path)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=True,
            expire_on_commit=False,
        )

    @classmethod
    def create(
        cls,
        path: Union[str, Path],
        categories: Iterable[str],
        log_dir: Optional[Union[str, Path]] = None,
    ) -> "Diary":
        """
        Create a new diary file at the current schema version.

        Args:
            path: Target file; must not exist
            categories: Initial abbreviations, in display order
            log_dir: Directory for log files (optional)

        Returns:
            The open diary

        Raises:
            CreateError: If a file exists at path or cannot be written
            DuplicateCategory: If the initial list repeats an abbreviation
            ValidationError: If an initial abbreviation is malformed

        No file is left behind when creation fails.
        """
        diary = cls(path, log_dir=log_dir)
        logger = safe_logger(diary.logger)

        if diary.db_path.exists():
            diary.close()
            raise CreateError(f"A file already exists at {diary.db_path}")
        if isinstance(categories, str):
            diary.close()
            raise ValidationError("Initial categories must be a list of abbreviations")
        categories = list(categories)

        logger.log_operation(
            "diary_create_start",
            {"db_path": str(diary.db_path), "categories": categories},
        )
        try:
            diary.db_path.parent.mkdir(parents=True, exist_ok=True)
            diary._setup_engine()
            with diary.session_scope() as session:
                Base.metadata.create_all(session.connection())
                session.add(
                    SchemaInfo(
                        version=CURRENT_SCHEMA_VERSION, description="Initial schema"
                    )
                )
                for abbreviation in categories:
                    diary.categories.add(abbreviation)
        except (DatabaseError, ValidationError):
            diary.close()
            diary.db_path.unlink(missing_ok=True)
            raise
        except (OSError, SQLAlchemyError) as e:
            logger.log_error(e, {"operation": "diary_create"})
            diary.close()
            diary.db_path.unlink(missing_ok=True)
            raise CreateError(f"Cannot create diary at {diary.db_path}: {e}") from e

        logger.log_operation("diary_create_complete", {"db_path": str(diary.db_path)})
        return diary

    @classmethod
    def open(
        cls,
        path: Union[str, Path],
        log_dir: Optional[Union[str, Path]] = None,
        backup_dir: Optional[Union[str, Path]] = None,
    ) -> "Diary":
        """
        Open an existing diary, migrating it to the current schema.

        Args:
            path: Diary file
            log_dir: Directory for log files (optional)
            backup_dir: Directory for a pre-migration backup (optional)

        Returns:
            The open diary

        Raises:
            OpenError: If the file is missing, not SQLite, or not a diary
            UnsupportedVersion: If the file is newer than this engine
            MigrationFailed: If an upgrade step fails (that step is rolled back)
        """
        diary = cls(path, log_dir=log_dir, backup_dir=backup_dir)
        logger = safe_logger(diary.logger)

        if not diary.db_path.is_file():
            diary.close()
            raise OpenError(f"Diary file not found: {diary.db_path}")

        try:
            diary._setup_engine()
            diary._check_tables()
            diary.migrate()
        except Exception:
            diary.close()
            raise

        logger.log_operation(
            "diary_open", {"db_path": str(diary.db_path), "version": CURRENT_SCHEMA_VERSION}
        )
        return diary

    def _check_tables(self) -> None:
        check_diary_tables(self._require_engine(), self.db_path)

    def _require_engine(self) -> Engine:
        if self.engine is None:
            raise DatabaseError(f"Diary is closed: {self.db_path}")
        return self.engine

    def _open_session(self) -> Session:
        """New session on the open engine; raises DatabaseError once closed."""
        self._require_engine()
        return self.SessionLocal()

    # ---- Lifecycle ----
    def close(self) -> None:
        """Dispose the engine and release log handlers; safe to call twice."""
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
            self.SessionLocal = None
            safe_logger(self.logger).log_debug(
                "Diary closed", {"db_path": str(self.db_path)}
            )
        if self.logger is not None:
            self.logger.close()

    @property
    def closed(self) -> bool:
        return self.engine is None

    def __enter__(self) -> "Diary":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<Diary(path={self.db_path}, {state})>"

    # ---- Session Management ----
    @contextmanager
    def session_scope(self):
        """
        Provide a transactional scope around store operations.

        Binds the category and entry managers (``diary.categories``,
        ``diary.entries``) to the session for the duration of the block.
        Commits on success and rolls back on any exception.

        Usage:
            with diary.session_scope():
                diary.categories.add("GAM")
                diary.entries.upsert(day, {"GAM": True})
        """
        session: Session = self._open_session()
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        logger = safe_logger(self.logger)

        outer = (self._category_manager, self._entry_manager)
        self._category_manager = CategoryManager(session, self.logger)
        self._entry_manager = EntryManager(session, self.logger)
        logger.log_debug("session_start", {"session_id": session_id})

        try:
            yield session
            session.commit()
            logger.log_debug("session_commit", {"session_id": session_id})
        except Exception as e:
            session.rollback()
            logger.log_error(
                e, {"operation": "session_rollback", "session_id": session_id}
            )
            raise
        finally:
            self._category_manager, self._entry_manager = outer
            session.close()

    @property
    def categories(self) -> CategoryManager:
        """
        CategoryManager bound to the active session.

        Raises:
            DatabaseError: If accessed outside of session_scope
        """
        if self._category_manager is None:
            raise DatabaseError(
                "CategoryManager requires active session. Use within session_scope."
            )
        return self._category_manager

    @property
    def entries(self) -> EntryManager:
        """
        EntryManager bound to the active session.

        Raises:
            DatabaseError: If accessed outside of session_scope
        """
        if self._entry_manager is None:
            raise DatabaseError(
                "EntryManager requires active session. Use within session_scope."
            )
        return self._entry_manager

    # ---- Schema ----
    @property
    def schema_version(self) -> int:
        """Schema version stored in the file."""
        return SchemaMigrator(self._require_engine(), self.logger).current_version()

    def migrate(self) -> int:
        """
        Bring the file up to the current schema version.

        A pre-migration backup is taken first when a backup directory is
        configured and there is something to apply.

        Returns:
            Schema version reached
        """
        migrator = SchemaMigrator(self._require_engine(), self.logger)
        pending = migrator.pending_steps()
        if pending and self.backup_manager is not None:
            self.backup_manager.create_backup(
                "pre_migration", suffix=f"v{pending[0].from_version}"
            )
        return migrator.migrate()

    # ---- Categories ----
    def add_category(self, abbreviation: str) -> int:
        """Append a category, or un-hide an existing hidden one; returns its id."""
        with self.session_scope():
            return self.categories.add(abbreviation)

    def hide_category(self, abbreviation: str) -> bool:
        """Hide a category; returns False if it was already hidden."""
        with self.session_scope():
            return self.categories.hide(abbreviation)

    def list_categories(self, include_hidden: bool = True) -> List[Category]:
        with self.session_scope():
            return self.categories.get_all(include_hidden=include_hidden)

    def get_category(self, abbreviation: str) -> Category:
        with self.session_scope():
            return self.categories.get(abbreviation)

    # ---- Entries ----
    def upsert_entry(self, day: Any, flags: Mapping[str, Any]) -> bool:
        """
        Replace the flags of one day; omitted categories become False.

        Returns:
            True if an existing day was replaced, False if it was new
        """
        with self.session_scope():
            return self.entries.upsert(day, flags)

    def upsert_entries(self, items: Iterable[Tuple[Any, Mapping[str, Any]]]) -> int:
        """Upsert several days in one transaction; returns the number written."""
        with self.session_scope():
            return self.entries.upsert_many(items)

    def get_entry(self, day: Any) -> DiaryEntry:
        with self.session_scope():
            return self.entries.get(day)

    def iter_entries(self, period: Period) -> EntrySequence:
        """
        Every day of ``period`` in ascending order, gaps read as all-false.

        The returned sequence is lazy and re-reads the diary each time it
        is iterated.
        """
        self._require_engine()
        return EntrySequence(self._open_session, period, self.logger)

    def missing_dates(self, until: Any, since: Any = None) -> List[date]:
        """
        Days in ``[since, until]`` that have no stored row.

        Args:
            until: Last day checked (inclusive)
            since: First day checked; defaults to the earliest recorded day

        Returns:
            Missing days in ascending order; empty for an empty diary
        """
        until = DataValidator.normalize_date(until)
        if since is None:
            bounds = self.date_bounds()
            if bounds is None:
                return []
            since = bounds[0]
        since = DataValidator.normalize_date(since)
        if since > until:
            return []

        return [
            entry.date
            for entry in self.iter_entries(Period.between(since, until))
            if not entry.recorded
        ]

    def date_bounds(self) -> Optional[Tuple[date, date]]:
        """Earliest and latest recorded days, or None when nothing is recorded."""
        with self.session_scope():
            return self.entries.date_bounds()

    def recorded_period(self) -> Optional[Period]:
        """Period from the earliest through the latest recorded day, or None."""
        bounds = self.date_bounds()
        if bounds is None:
            return None
        return Period.between(*bounds)

    def is_empty(self) -> bool:
        with self.session_scope():
            return self.entries.is_empty()


def open_diary(
    path: Union[str, Path],
    log_dir: Optional[Union[str, Path]] = None,
    backup_dir: Optional[Union[str, Path]] = None,
) -> Diary:
    """Open an existing diary; see Diary.open."""
    return Diary.open(path, log_dir=log_dir, backup_dir=backup_dir)


def create_diary(
    path: Union[str, Path],
    categories: Iterable[str],
    log_dir: Optional[Union[str, Path]] = None,
) -> Diary:
    """Create a new diary; see Diary.create."""
    return Diary.create(path, categories, log_dir=log_dir)
