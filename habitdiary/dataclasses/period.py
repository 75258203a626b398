#!/usr/bin/env python3
"""
period.py
---------
Half-open ranges of calendar days used for aggregation.

A Period covers ``[start, start + length)``. Building periods backward
from a reference day is done with ``Period.ending_on``:

    >>> Period.ending_on(date(2024, 1, 11), 30).start
    datetime.date(2023, 12, 13)
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, List

from habitdiary.core.exceptions import ValidationError
from habitdiary.core.validators import DataValidator

OUT_OF_RANGE = "periods extend outside the supported date range"


@dataclass(frozen=True)
class Period:
    """
    Consecutive span of days.

    Attributes:
        start: First day of the period (inclusive)
        length: Number of days covered, at least 1
    """

    start: date
    length: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", DataValidator.normalize_date(self.start))
        object.__setattr__(
            self, "length", DataValidator.normalize_positive_int(self.length, "length")
        )
        try:
            self.start + timedelta(days=self.length)
        except OverflowError as e:
            raise ValidationError(OUT_OF_RANGE) from e

    @classmethod
    def ending_on(cls, last_day: date, length: int) -> "Period":
        """Period of ``length`` days whose final (inclusive) day is ``last_day``."""
        last_day = DataValidator.normalize_date(last_day)
        length = DataValidator.normalize_positive_int(length, "length")
        try:
            start = last_day - timedelta(days=length - 1)
        except OverflowError as e:
            raise ValidationError(OUT_OF_RANGE) from e
        return cls(start, length)

    @classmethod
    def between(cls, first_day: date, last_day: date) -> "Period":
        """Period covering ``first_day`` through ``last_day``, both inclusive."""
        first_day = DataValidator.normalize_date(first_day)
        last_day = DataValidator.normalize_date(last_day)
        return cls(first_day, (last_day - first_day).days + 1)

    @property
    def end(self) -> date:
        """First day after the period (exclusive bound)."""
        return self.start + timedelta(days=self.length)

    @property
    def last_day(self) -> date:
        """Final day inside the period (inclusive bound)."""
        return self.end - timedelta(days=1)

    def days(self) -> Iterator[date]:
        """Iterate over every day of the period in ascending order."""
        for offset in range(self.length):
            yield self.start + timedelta(days=offset)

    def __iter__(self) -> Iterator[date]:
        return self.days()

    def __len__(self) -> int:
        return self.length

    def __contains__(self, day: object) -> bool:
        if not isinstance(day, date):
            return False
        return self.start <= DataValidator.normalize_date(day) < self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()}..{self.last_day.isoformat()}"


def period_ranges(until: date, period_length: int, num_periods: int) -> List[Period]:
    """
    Consecutive, non-overlapping periods counted backward from ``until``.

    Period 0 ends on ``until`` (inclusive); each following period ends the
    day before the previous one starts.

    Args:
        until: Last day of the most recent period
        period_length: Days per period
        num_periods: Number of periods

    Returns:
        Periods ordered most recent first

    Example:
        ``period_ranges(date(2000, 5, 30), 5, 3)`` covers 05-26..05-30,
        05-21..05-25 and 05-16..05-20.
    """
    until = DataValidator.normalize_date(until)
    period_length = DataValidator.normalize_positive_int(period_length, "period_length")
    num_periods = DataValidator.normalize_positive_int(num_periods, "num_periods")
    try:
        return [
            Period.ending_on(until - timedelta(days=index * period_length), period_length)
            for index in range(num_periods)
        ]
    except OverflowError as e:
        raise ValidationError(OUT_OF_RANGE) from e
