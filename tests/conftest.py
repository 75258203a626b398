"""
conftest.py
-----------
Shared pytest fixtures for habitdiary tests.

Provides fixtures for:
- Diary setup and teardown on temporary files
- Version-0 diary files, as written before schema versioning existed
- Manager instances bound to a live session
- Mock loggers
"""
import sqlite3
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, Optional
from unittest.mock import MagicMock

import pytest

from habitdiary.core.logging_manager import DiaryLogger


# ----- Path Fixtures -----

@pytest.fixture
def test_db_path(tmp_path):
    """Temporary diary path (file does not exist yet)."""
    return tmp_path / "habits.db"


@pytest.fixture
def mock_logger():
    """MagicMock standing in for DiaryLogger."""
    return MagicMock(spec=DiaryLogger)


# ----- Diary Fixtures -----

@pytest.fixture
def diary(test_db_path):
    """
    Diary created with categories GAM and PNO.

    Closed after the test.
    """
    from habitdiary.database.manager import Diary

    instance = Diary.create(test_db_path, ["GAM", "PNO"])
    yield instance
    instance.close()


@pytest.fixture
def db_session(diary):
    """Session inside a diary transaction; committed when the test ends."""
    with diary.session_scope() as session:
        yield session


@pytest.fixture
def category_manager(db_session):
    """Create CategoryManager instance for testing."""
    from habitdiary.database.managers.category_manager import CategoryManager
    return CategoryManager(db_session)


@pytest.fixture
def entry_manager(db_session):
    """Create EntryManager instance for testing."""
    from habitdiary.database.managers.entry_manager import EntryManager
    return EntryManager(db_session)


# ----- Version-0 Files -----

V0_SCHEMA = """
CREATE TABLE categories (
    id INTEGER NOT NULL PRIMARY KEY,
    abbreviation VARCHAR COLLATE NOCASE NOT NULL UNIQUE,
    display_order INTEGER NOT NULL,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL,
    CONSTRAINT ck_category_non_empty_abbreviation CHECK (abbreviation != '')
);
CREATE INDEX ix_categories_display_order ON categories (display_order);
CREATE TABLE day_entries (
    date DATE NOT NULL PRIMARY KEY,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
);
CREATE TABLE entry_flags (
    date DATE NOT NULL REFERENCES day_entries (date) ON DELETE CASCADE,
    category_id INTEGER NOT NULL REFERENCES categories (id) ON DELETE RESTRICT,
    occurred BOOLEAN NOT NULL,
    PRIMARY KEY (date, category_id)
);
CREATE INDEX ix_entry_flags_category_id ON entry_flags (category_id);
"""

TIMESTAMP = "2023-06-01 12:00:00.000000"


def write_v0_diary(
    path: Path,
    categories: Iterable[str],
    entries: Optional[Dict[date, Dict[str, bool]]] = None,
) -> Path:
    """
    Write a diary file with the version-0 table layout.

    Categories have no hidden flag and there is no schema_info table.
    """
    categories = list(categories)
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(V0_SCHEMA)
        for order, abbreviation in enumerate(categories):
            conn.execute(
                "INSERT INTO categories (id, abbreviation, display_order, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (order + 1, abbreviation, order, TIMESTAMP, TIMESTAMP),
            )
        for day, flags in (entries or {}).items():
            conn.execute(
                "INSERT INTO day_entries (date, created_at, updated_at) VALUES (?, ?, ?)",
                (day.isoformat(), TIMESTAMP, TIMESTAMP),
            )
            for order, abbreviation in enumerate(categories):
                conn.execute(
                    "INSERT INTO entry_flags (date, category_id, occurred) VALUES (?, ?, ?)",
                    (day.isoformat(), order + 1, int(flags.get(abbreviation, False))),
                )
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def v0_diary_factory(tmp_path):
    """
    Factory writing version-0 diary files under tmp_path.

    Usage:
        path = v0_diary_factory(["GAM"], {date(2024, 1, 10): {"GAM": True}})
    """

    def _factory(categories, entries=None, name="legacy.db"):
        return write_v0_diary(tmp_path / name, categories, entries)

    return _factory
