#!/usr/bin/env python3
"""
managers package
--------------------
Stores composed by the Diary.

Each manager is bound to the session of one ``Diary.session_scope`` block
and inherits from BaseManager.

Available Managers:
    BaseManager: Abstract base class with common lookups
    CategoryManager: Manages the categories table
    EntryManager: Manages day_entries and entry_flags
    EntrySequence: Lazy, restartable iteration over a date range

Usage:
    from habitdiary.database.managers import CategoryManager, EntryManager

    category_mgr = CategoryManager(session, logger)
    entry_mgr = EntryManager(session, logger)
"""
from .base_manager import BaseManager, fold_abbreviation
from .category_manager import CategoryManager
from .entry_manager import EntryManager, EntrySequence

__all__ = [
    "BaseManager",
    "fold_abbreviation",
    "CategoryManager",
    "EntryManager",
    "EntrySequence",
]
