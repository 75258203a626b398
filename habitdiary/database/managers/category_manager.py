#!/usr/bin/env python3
"""
category_manager.py
--------------------
Manages the set of habit categories.

Categories are identified by a short abbreviation that is unique across
hidden and visible categories, compared case-insensitively. They are
never deleted: hiding keeps their history, and adding a hidden
abbreviation again brings it back at its original position.

Key Features:
    - Append-only display order
    - Hide / un-hide instead of delete
    - Case-insensitive lookup returning the stored spelling

Usage:
    category_mgr = CategoryManager(session, logger)

    category_id = category_mgr.add("GAM")
    category_mgr.hide("GAM")
    visible = category_mgr.get_all(include_hidden=False)
"""
from typing import List, Optional

from sqlalchemy import func, select

from habitdiary.core.exceptions import CategoryNotFound, DuplicateCategory
from habitdiary.core.logging_manager import safe_logger
from habitdiary.core.validators import DataValidator
from habitdiary.dataclasses import Category
from habitdiary.database.decorators import handle_db_errors, log_database_operation
from habitdiary.database.models import HabitCategory
from .base_manager import BaseManager, fold_abbreviation


class CategoryManager(BaseManager):
    """Manages categories table operations."""

    @staticmethod
    def to_value(category: HabitCategory) -> Category:
        """Detached snapshot of an ORM category."""
        return Category(
            id=category.id,
            abbreviation=category.abbreviation,
            display_order=category.display_order,
            hidden=bool(category.hidden),
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def find(self, abbreviation: str) -> Optional[HabitCategory]:
        """
        Case-insensitive lookup.

        Args:
            abbreviation: Abbreviation in any letter case

        Returns:
            The category, or None if it does not exist
        """
        abbreviation = DataValidator.normalize_abbreviation(abbreviation)
        return self._categories_by_key().get(fold_abbreviation(abbreviation))

    @handle_db_errors
    def get(self, abbreviation: str) -> Category:
        """
        Retrieve one category.

        Raises:
            CategoryNotFound: If no category has this abbreviation
        """
        category = self.find(abbreviation)
        if category is None:
            raise CategoryNotFound(abbreviation)
        return self.to_value(category)

    @handle_db_errors
    def get_all(self, include_hidden: bool = True) -> List[Category]:
        """
        Categories ordered by display order.

        Args:
            include_hidden: Whether hidden categories are included

        Returns:
            List of Category snapshots
        """
        return [
            self.to_value(category)
            for category in self._ordered_categories(include_hidden=include_hidden)
        ]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("add_category")
    def add(self, abbreviation: str) -> int:
        """
        Add a category at the end of the display order, or un-hide it.

        Args:
            abbreviation: New abbreviation

        Returns:
            Id of the new or un-hidden category

        Raises:
            ValidationError: If the abbreviation is malformed
            DuplicateCategory: If a visible category already uses it
        """
        abbreviation = DataValidator.normalize_abbreviation(abbreviation)
        existing = self.find(abbreviation)

        if existing is not None:
            if not existing.hidden:
                raise DuplicateCategory(existing.abbreviation)
            existing.hidden = False
            self.session.flush()
            safe_logger(self.logger).log_info(
                "Category un-hidden",
                {"abbreviation": existing.abbreviation, "id": existing.id},
            )
            return existing.id

        last_order = self.session.scalar(select(func.max(HabitCategory.display_order)))
        category = HabitCategory(
            abbreviation=abbreviation,
            display_order=0 if last_order is None else last_order + 1,
            hidden=False,
        )
        self.session.add(category)
        self.session.flush()
        return category.id

    @handle_db_errors
    @log_database_operation("hide_category")
    def hide(self, abbreviation: str) -> bool:
        """
        Hide a category; order and entry data are untouched.

        Returns:
            True if the category was visible, False if it was already hidden

        Raises:
            CategoryNotFound: If no category has this abbreviation
        """
        category = self.find(abbreviation)
        if category is None:
            raise CategoryNotFound(abbreviation)

        if category.hidden:
            safe_logger(self.logger).log_debug(
                "Category already hidden", {"abbreviation": category.abbreviation}
            )
            return False

        category.hidden = True
        self.session.flush()
        return True
