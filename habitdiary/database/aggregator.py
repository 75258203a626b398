#!/usr/bin/env python3
"""
aggregator.py
------------------
Period statistics and composition rankings over a diary.

Both queries are read-only and deterministic: the result depends only on
the diary contents and the arguments. Each makes a single pass over the
days it covers through ``Diary.iter_entries``.

Usage:
    aggregator = Aggregator(diary)

    summaries = aggregator.compare_periods(30, 2)
    top = aggregator.most_frequent_compositions(Period.ending_on(day, 90), 5)
"""
from collections import Counter
from datetime import date, timedelta
from typing import Dict, FrozenSet, List, Optional

from habitdiary.core.exceptions import ValidationError
from habitdiary.core.logging_manager import safe_logger
from habitdiary.core.validators import DataValidator
from habitdiary.dataclasses import (
    CompositionCount,
    Period,
    PeriodSummary,
    period_ranges,
)
from .decorators import handle_db_errors, log_database_operation
from .manager import Diary


class Aggregator:
    """
    Computes statistics from a Diary.

    Holds a read-only reference to the diary; results never refer back
    to it.
    """

    def __init__(self, diary: Diary) -> None:
        """
        Initialize the aggregator.

        Args:
            diary: Open diary to read from
        """
        self.diary = diary
        self.logger = diary.logger

    @handle_db_errors
    @log_database_operation("compare_periods")
    def compare_periods(
        self,
        period_length: int,
        num_periods: int,
        visible_only: bool = True,
        until: Optional[date] = None,
    ) -> List[PeriodSummary]:
        """
        Count category occurrences over consecutive periods.

        Periods are counted backward: period 0 ends on ``until`` (inclusive),
        period 1 ends the day before period 0 starts, and so on.

        Args:
            period_length: Days per period, at least 1
            num_periods: Number of periods, at least 1
            visible_only: Leave hidden categories out of the counts
            until: Last day of period 0; defaults to yesterday, the most
                recent complete day

        Returns:
            One PeriodSummary per period, most recent first

        Raises:
            ValidationError: If period_length or num_periods is below 1
        """
        if until is None:
            until = date.today() - timedelta(days=1)
        periods = period_ranges(until, period_length, num_periods)
        period_length = periods[0].length
        last_day = periods[0].last_day

        abbreviations = [
            category.abbreviation
            for category in self.diary.list_categories(include_hidden=not visible_only)
        ]
        counts: List[Dict[str, int]] = [
            dict.fromkeys(abbreviations, 0) for _ in periods
        ]

        covered = Period.between(periods[-1].start, last_day)
        for entry in self.diary.iter_entries(covered):
            if not entry.recorded:
                continue
            bucket = counts[(last_day - entry.date).days // period_length]
            for abbreviation in abbreviations:
                if entry.occurred(abbreviation):
                    bucket[abbreviation] += 1

        return [
            PeriodSummary(index, period, counts[index])
            for index, period in enumerate(periods)
        ]

    @handle_db_errors
    @log_database_operation("most_frequent_compositions")
    def most_frequent_compositions(
        self, period: Period, top_k: int
    ) -> List[CompositionCount]:
        """
        Rank the distinct daily compositions of a period.

        Every day counts, unrecorded days as the empty composition. Hidden
        categories are part of the compositions. Equal counts are ordered
        by recency: the composition seen most recently comes first.

        Args:
            period: Days considered
            top_k: Maximum number of results, at least 1

        Returns:
            Up to top_k (composition, count) pairs, most frequent first

        Raises:
            ValidationError: If top_k is below 1 or period is not a Period
        """
        top_k = DataValidator.normalize_positive_int(top_k, "top_k")
        if not isinstance(period, Period):
            raise ValidationError(f"Expected a Period, got {type(period).__name__}")

        counts: Counter = Counter()
        last_seen: Dict[FrozenSet[str], date] = {}
        for entry in self.diary.iter_entries(period):
            composition = entry.composition
            counts[composition] += 1
            last_seen[composition] = entry.date

        ranked = sorted(
            counts.items(),
            key=lambda item: (-item[1], -last_seen[item[0]].toordinal()),
        )
        safe_logger(self.logger).log_debug(
            "Compositions ranked",
            {"period": str(period), "distinct": len(ranked), "top_k": top_k},
        )
        return [CompositionCount(composition, count) for composition, count in ranked[:top_k]]
