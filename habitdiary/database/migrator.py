#!/usr/bin/env python3
"""
migrator.py
--------------------
Integer-versioned schema upgrades for diary files.

The stored version is the highest row of ``schema_info``; files written
before version tracking existed have no such table and are version 0.

Each step ``v -> v + 1`` runs in its own transaction. The step's schema
change and the ``schema_info`` row recording ``v + 1`` commit together, so
a file is never observable at a version that does not match its table
shape. Steps are written with Alembic's operation API, the same calls a
revision script would use.

Steps:
    0 -> 1: Add the ``hidden`` flag to categories (default false)

Usage:
    migrator = SchemaMigrator(engine, logger)
    migrator.migrate()  # returns the version reached
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

# --- Third party ---
import sqlalchemy as sa
from alembic.operations import Operations
from alembic.runtime.migration import MigrationContext
from sqlalchemy import Engine, func, insert, inspect, select
from sqlalchemy.exc import SQLAlchemyError

# --- Local imports ---
from habitdiary.core.exceptions import (
    MigrationFailed,
    OpenError,
    UnsupportedVersion,
)
from habitdiary.core.logging_manager import DiaryLogger, safe_logger
from .models import SchemaInfo

CURRENT_SCHEMA_VERSION = 1
"""Newest schema version this engine reads and writes."""


@dataclass(frozen=True)
class MigrationStep:
    """
    One upgrade from ``from_version`` to ``from_version + 1``.

    Attributes:
        from_version: Version the step applies to
        description: Stored in schema_info alongside the new version
        upgrade: Callable receiving Alembic Operations bound to the
            step's transaction
    """

    from_version: int
    description: str
    upgrade: Callable[[Operations], None]


def _add_category_hidden_flag(op: Operations) -> None:
    """Add the hidden flag to every existing category, defaulting to visible."""
    op.add_column(
        "categories",
        sa.Column(
            "hidden",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("0"),
        ),
    )


MIGRATION_STEPS: Dict[int, MigrationStep] = {
    0: MigrationStep(0, "Add hidden flag to categories", _add_category_hidden_flag),
}


class SchemaMigrator:
    """
    Brings a diary file up to CURRENT_SCHEMA_VERSION.

    Attributes:
        engine: Engine bound to the diary file (see create_diary_engine)
        logger: Optional logger for migration tracking
        target_version: Version migrate() stops at
    """

    def __init__(
        self,
        engine: Engine,
        logger: Optional[DiaryLogger] = None,
        target_version: int = CURRENT_SCHEMA_VERSION,
        steps: Optional[Dict[int, MigrationStep]] = None,
    ) -> None:
        self.engine = engine
        self.logger = logger
        self.target_version = target_version
        self.steps = MIGRATION_STEPS if steps is None else steps

    def current_version(self) -> int:
        """
        Read the stored schema version without writing.

        Returns:
            Highest version recorded in schema_info, 0 if untracked

        Raises:
            OpenError: If the file cannot be read as a database
        """
        try:
            with self.engine.connect() as conn:
                if not inspect(conn).has_table(SchemaInfo.__tablename__):
                    return 0
                stored = conn.execute(select(func.max(SchemaInfo.version))).scalar()
        except SQLAlchemyError as e:
            raise OpenError(f"Cannot read schema version: {e}") from e
        return stored or 0

    def pending_steps(self) -> List[MigrationStep]:
        """
        Steps that migrate() would apply, in order.

        Raises:
            UnsupportedVersion: If the file is newer than this engine
            MigrationFailed: If a required step is not registered
        """
        stored = self.current_version()
        if stored > self.target_version:
            raise UnsupportedVersion(stored, self.target_version)

        pending = []
        for version in range(stored, self.target_version):
            step = self.steps.get(version)
            if step is None:
                raise MigrationFailed(version, "no migration step registered")
            pending.append(step)
        return pending

    def migrate(self) -> int:
        """
        Apply every pending step, one transaction per step.

        Running it on an up-to-date file does nothing.

        Returns:
            Schema version reached

        Raises:
            UnsupportedVersion: If the file is newer than this engine;
                nothing is written
            MigrationFailed: If a step errors; that step is rolled back
        """
        logger = safe_logger(self.logger)
        pending = self.pending_steps()
        if not pending:
            logger.log_debug(
                "Schema already current", {"version": self.target_version}
            )
            return self.target_version

        for step in pending:
            self._apply_step(step)
        return self.target_version

    def _apply_step(self, step: MigrationStep) -> None:
        """Run one step and record its version inside a single transaction."""
        logger = safe_logger(self.logger)
        new_version = step.from_version + 1
        logger.log_info(
            "Applying schema migration",
            {"from": step.from_version, "to": new_version, "step": step.description},
        )

        try:
            with self.engine.begin() as conn:
                context = MigrationContext.configure(conn)
                step.upgrade(Operations(context))
                SchemaInfo.__table__.create(conn, checkfirst=True)
                conn.execute(
                    insert(SchemaInfo).values(
                        version=new_version, description=step.description
                    )
                )
        except Exception as e:
            logger.log_error(
                e,
                {"operation": "migrate", "from": step.from_version, "to": new_version},
            )
            raise MigrationFailed(step.from_version, str(e)) from e

        logger.log_operation(
            "schema_migrated",
            {"from": step.from_version, "to": new_version, "step": step.description},
        )
