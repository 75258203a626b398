#!/usr/bin/env python3
"""
statistics.py
-------------
Immutable result structures produced by the Aggregator.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import FrozenSet, Mapping, NamedTuple

from .period import Period


@dataclass(frozen=True)
class PeriodSummary:
    """
    Occurrence counts of each category within one period.

    Attributes:
        index: Position in the comparison, 0 being the most recent period
        period: Days covered
        counts: Read-only mapping abbreviation -> number of days it occurred,
            in display order
    """

    index: int
    period: Period
    counts: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "counts", MappingProxyType(dict(self.counts)))

    @property
    def start(self) -> date:
        return self.period.start

    @property
    def end(self) -> date:
        """Exclusive end of the period."""
        return self.period.end

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PeriodSummary):
            return NotImplemented
        return (
            self.index == other.index
            and self.period == other.period
            and dict(self.counts) == dict(other.counts)
        )

    def __hash__(self) -> int:
        return hash((self.index, self.period, tuple(self.counts.items())))


class CompositionCount(NamedTuple):
    """A distinct daily composition and the number of days it occurred."""

    composition: FrozenSet[str]
    count: int
