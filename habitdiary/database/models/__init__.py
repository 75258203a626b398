"""
Database Models Package
------------------------

SQLAlchemy ORM models for the diary database.

- base: Base class and timestamp mixin
- core: SchemaInfo, HabitCategory, DayEntry, EntryFlag

Usage:
    from habitdiary.database.models import HabitCategory, DayEntry
"""
from .base import Base, TimestampMixin, utc_now
from .core import DayEntry, EntryFlag, HabitCategory, SchemaInfo

__all__ = [
    "Base",
    "TimestampMixin",
    "utc_now",
    "SchemaInfo",
    "HabitCategory",
    "DayEntry",
    "EntryFlag",
]
