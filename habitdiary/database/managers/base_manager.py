#!/usr/bin/env python3
"""
base_manager.py
--------------------
Base manager shared by the category and entry stores.

Managers are bound to one SQLAlchemy session for the duration of a
``Diary.session_scope`` block; they never commit or roll back themselves.

Example:
    class CategoryManager(BaseManager):
        def add(self, abbreviation: str) -> int:
            ...
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from abc import ABC
from typing import Dict, List, Optional

# --- Third party imports ---
from sqlalchemy import select
from sqlalchemy.orm import Session

# --- Local imports ---
from habitdiary.core.logging_manager import DiaryLogger
from habitdiary.database.models import HabitCategory


def fold_abbreviation(abbreviation: str) -> str:
    """Key used for case-insensitive abbreviation comparison."""
    return abbreviation.casefold()


class BaseManager(ABC):
    """
    Abstract base for diary stores.

    Attributes:
        session: SQLAlchemy session for database operations
        logger: Optional logger for operation tracking
    """

    def __init__(self, session: Session, logger: Optional[DiaryLogger] = None):
        """
        Initialize the manager.

        Args:
            session: SQLAlchemy session
            logger: Optional logger for operation tracking
        """
        self.session = session
        self.logger = logger

    def _ordered_categories(self, include_hidden: bool = True) -> List[HabitCategory]:
        """Categories in display order (ties broken by creation id)."""
        stmt = select(HabitCategory).order_by(
            HabitCategory.display_order, HabitCategory.id
        )
        if not include_hidden:
            stmt = stmt.where(HabitCategory.hidden.is_(False))
        return list(self.session.scalars(stmt))

    def _categories_by_key(self) -> Dict[str, HabitCategory]:
        """All categories keyed by folded abbreviation."""
        return {
            fold_abbreviation(category.abbreviation): category
            for category in self._ordered_categories()
        }
