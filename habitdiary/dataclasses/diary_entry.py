#!/usr/bin/env python3
"""
diary_entry.py
--------------
Per-day record of which habits occurred.

A DiaryEntry always carries a flag for every category of the diary
(hidden ones included) so two entries read at the same time are directly
comparable. Days without a stored row are represented by synthesized
entries with every flag False and ``recorded`` False.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping


@dataclass(frozen=True)
class DiaryEntry:
    """
    Immutable view of one diary day.

    Attributes:
        date: Calendar day
        flags: Read-only mapping abbreviation -> occurred, in display order
        recorded: False when the day has no stored row
    """

    date: date
    flags: Mapping[str, bool] = field(default_factory=dict)
    recorded: bool = True

    def __post_init__(self) -> None:
        # Freeze the mapping so entries cannot be edited after the fact
        object.__setattr__(self, "flags", MappingProxyType(dict(self.flags)))

    @classmethod
    def empty(cls, day: date, abbreviations: Iterable[str]) -> "DiaryEntry":
        """Synthesize the all-false entry used for days without a row."""
        return cls(day, {abbr: False for abbr in abbreviations}, recorded=False)

    @property
    def composition(self) -> FrozenSet[str]:
        """Set of abbreviations that occurred on this day."""
        return frozenset(abbr for abbr, occurred in self.flags.items() if occurred)

    def occurred(self, abbreviation: str) -> bool:
        """Flag for one category; unknown abbreviations read as False."""
        return self.flags.get(abbreviation, False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DiaryEntry):
            return NotImplemented
        return (
            self.date == other.date
            and dict(self.flags) == dict(other.flags)
            and self.recorded == other.recorded
        )

    def __hash__(self) -> int:
        return hash((self.date, tuple(self.flags.items()), self.recorded))
