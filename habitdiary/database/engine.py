#!/usr/bin/env python3
"""
engine.py
--------------------
SQLAlchemy engine factory for diary files.

pysqlite opens transactions implicitly only before DML and runs DDL in
autocommit mode. Diary engines disable that behaviour and emit ``BEGIN``
themselves, so schema changes made by migration steps commit or roll back
together with the version marker. Foreign keys are enforced on every
connection.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path
from typing import Union

# --- Third party ---
from sqlalchemy import Engine, create_engine, event


def create_diary_engine(db_path: Union[str, Path], echo: bool = False) -> Engine:
    """
    Create an engine bound to a diary file.

    Creating the engine does not touch the file; the first connection does.

    Args:
        db_path: Path to the SQLite file
        echo: Log emitted SQL (debugging only)

    Returns:
        Configured SQLAlchemy engine
    """
    engine = create_engine(
        f"sqlite:///{Path(db_path)}",
        echo=echo,
        future=True,
    )

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(connection):
        connection.exec_driver_sql("BEGIN")

    return engine
