#!/usr/bin/env python3
"""
entry_manager.py
--------------------
Manages per-day habit records.

Each recorded day has one ``day_entries`` row and one ``entry_flags`` row
per category. Writing a day is a total replace: categories missing from
the supplied flags are stored as not occurred. Reading a day that was
never recorded yields an all-false entry.

Key Features:
    - Upsert of single days or batches
    - Case-insensitive flag keys resolved to stored abbreviations
    - Lazy, restartable iteration over date ranges with gaps filled in

Usage:
    entry_mgr = EntryManager(session, logger)

    entry_mgr.upsert(date(2024, 1, 10), {"GAM": True})
    entry = entry_mgr.get(date(2024, 1, 10))

    for entry in EntrySequence(diary.SessionLocal, Period(date(2024, 1, 1), 31)):
        ...
"""
from datetime import date
from itertools import groupby
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from habitdiary.core.exceptions import DatabaseError, UnknownCategory, ValidationError
from habitdiary.core.logging_manager import DiaryLogger, safe_logger
from habitdiary.core.validators import DataValidator
from habitdiary.dataclasses import DiaryEntry, Period
from habitdiary.database.decorators import handle_db_errors, log_database_operation
from habitdiary.database.models import DayEntry, EntryFlag, HabitCategory, utc_now
from .base_manager import BaseManager, fold_abbreviation


class EntryManager(BaseManager):
    """
    Manages day_entries and entry_flags table operations.
    """

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _resolve_flags(
        self, flags: Mapping[str, Any], categories: Dict[str, HabitCategory]
    ) -> Dict[int, bool]:
        """
        Map caller flag keys to category ids.

        Args:
            flags: abbreviation -> occurred, keys in any letter case
            categories: All categories keyed by folded abbreviation

        Returns:
            category id -> normalized occurred flag

        Raises:
            UnknownCategory: If any key names no category
            ValidationError: If a value is not boolean-like, or two keys
                naming the same category disagree
        """
        if not isinstance(flags, Mapping):
            raise ValidationError(
                f"Entry flags must be a mapping, got {type(flags).__name__}"
            )

        resolved: Dict[int, bool] = {}
        unknown = []
        for key, value in flags.items():
            abbreviation = DataValidator.normalize_abbreviation(key)
            category = categories.get(fold_abbreviation(abbreviation))
            if category is None:
                unknown.append(abbreviation)
                continue

            occurred = DataValidator.normalize_bool(value)
            if resolved.get(category.id, occurred) != occurred:
                raise ValidationError(
                    f"Conflicting flags given for category '{category.abbreviation}'"
                )
            resolved[category.id] = occurred

        if unknown:
            raise UnknownCategory(unknown)
        return resolved

    def _write(
        self, day: date, resolved: Dict[int, bool], categories: Iterable[HabitCategory]
    ) -> bool:
        """Store one day; returns True if an existing row was replaced."""
        entry = self.session.get(DayEntry, day)
        replaced = entry is not None
        if entry is None:
            entry = DayEntry(date=day)
            self.session.add(entry)
        else:
            entry.updated_at = utc_now()

        existing = {flag.category_id: flag for flag in entry.flags}
        for category in categories:
            occurred = resolved.get(category.id, False)
            flag = existing.get(category.id)
            if flag is None:
                entry.flags.append(EntryFlag(category_id=category.id, occurred=occurred))
            else:
                flag.occurred = occurred
        return replaced

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("upsert_entry")
    def upsert(self, day: Any, flags: Mapping[str, Any]) -> bool:
        """
        Replace the whole flag set of one day.

        Args:
            day: date, datetime or ISO string
            flags: abbreviation -> occurred; omitted categories become False

        Returns:
            True if the day was already recorded, False if newly added

        Raises:
            ValidationError: If the date or a flag value is invalid
            UnknownCategory: If a key names no category; nothing is written
        """
        day = DataValidator.normalize_date(day)
        categories = self._categories_by_key()
        resolved = self._resolve_flags(flags, categories)
        replaced = self._write(day, resolved, categories.values())
        self.session.flush()
        return replaced

    @handle_db_errors
    @log_database_operation("upsert_entries")
    def upsert_many(self, items: Iterable[Tuple[Any, Mapping[str, Any]]]) -> int:
        """
        Upsert several days; every item is validated before anything is written.

        Args:
            items: (day, flags) pairs; a day appearing twice keeps the last flags

        Returns:
            Number of days written

        Raises:
            ValidationError: If any date or flag value is invalid
            UnknownCategory: If any key names no category
        """
        categories = self._categories_by_key()
        prepared: Dict[date, Dict[int, bool]] = {}
        for day, flags in items:
            prepared[DataValidator.normalize_date(day)] = self._resolve_flags(
                flags, categories
            )

        for day in sorted(prepared):
            self._write(day, prepared[day], categories.values())
        self.session.flush()

        safe_logger(self.logger).log_debug(
            "Batch upsert written", {"days": len(prepared)}
        )
        return len(prepared)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @handle_db_errors
    def get(self, day: Any) -> DiaryEntry:
        """
        Read one day.

        Returns:
            The stored entry, or an all-false entry with recorded=False
        """
        day = DataValidator.normalize_date(day)
        categories = self._ordered_categories()
        entry = self.session.get(DayEntry, day)
        if entry is None:
            return DiaryEntry.empty(day, (c.abbreviation for c in categories))

        values = {flag.category_id: flag.occurred for flag in entry.flags}
        return DiaryEntry(
            day, {c.abbreviation: bool(values.get(c.id, False)) for c in categories}
        )

    @handle_db_errors
    def date_bounds(self) -> Optional[Tuple[date, date]]:
        """
        Earliest and latest recorded days.

        Returns:
            (first, last), or None if nothing is recorded
        """
        first, last = self.session.execute(
            select(func.min(DayEntry.date), func.max(DayEntry.date))
        ).one()
        if first is None:
            return None
        return first, last

    @handle_db_errors
    def is_empty(self) -> bool:
        """True if no day has been recorded."""
        return self.session.scalar(select(func.count()).select_from(DayEntry)) == 0


class EntrySequence:
    """
    Lazy, finite, restartable sequence of diary days.

    Covers every day of a period in ascending order. Recorded days carry
    their stored flags; other days are synthesized as all-false. Each
    iteration opens its own session and re-reads the store, so iterating
    again after a write sees the new data.

    Attributes:
        period: Days covered
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        period: Period,
        logger: Optional[DiaryLogger] = None,
    ) -> None:
        if not isinstance(period, Period):
            raise ValidationError(f"Expected a Period, got {type(period).__name__}")
        self._session_factory = session_factory
        self.period = period
        self.logger = logger

    def __len__(self) -> int:
        return len(self.period)

    def __iter__(self) -> Iterator[DiaryEntry]:
        try:
            yield from self._iterate()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to read entries for {self.period}: {e}") from e

    def _iterate(self) -> Iterator[DiaryEntry]:
        with self._session_factory() as session:
            categories = BaseManager(session)._ordered_categories()
            abbreviations = {c.id: c.abbreviation for c in categories}

            stmt = (
                select(DayEntry.date, EntryFlag.category_id, EntryFlag.occurred)
                .outerjoin(EntryFlag, EntryFlag.date == DayEntry.date)
                .where(DayEntry.date >= self.period.start)
                .where(DayEntry.date < self.period.end)
                .order_by(DayEntry.date)
            )
            stored = groupby(session.execute(stmt), key=lambda row: row.date)

            safe_logger(self.logger).log_debug(
                "Iterating entries", {"period": str(self.period)}
            )
            next_stored = next(stored, None)
            for day in self.period:
                if next_stored is not None and next_stored[0] == day:
                    values = {
                        row.category_id: bool(row.occurred)
                        for row in next_stored[1]
                        if row.category_id is not None
                    }
                    yield DiaryEntry(
                        day,
                        {
                            abbr: values.get(cat_id, False)
                            for cat_id, abbr in abbreviations.items()
                        },
                    )
                    next_stored = next(stored, None)
                else:
                    yield DiaryEntry.empty(day, abbreviations.values())

    def recorded(self) -> List[DiaryEntry]:
        """Only the days that have a stored row."""
        return [entry for entry in self if entry.recorded]
