#!/usr/bin/env python3
"""
settings.py
--------------------
Display and query parameters handed to the diary engine.

The settings file itself is owned by the presentation layer; the engine
only receives its flat key-value content and turns it into a validated
DiarySettings value.

Usage:
    settings = DiarySettings.from_mapping({"period_days": 7, "past_periods": 4})
    summaries = Aggregator(diary).compare_periods(
        settings.period_days, settings.past_periods
    )
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .paths import DB_PATH
from .validators import DataValidator

DEFAULT_PERIOD_DAYS = 30
DEFAULT_PAST_PERIODS = 2
DEFAULT_MAX_DISPLAYED_COLS = 70
DEFAULT_LIST_PREVIOUS_DAYS = 0
DEFAULT_LIST_MOST_FREQUENT_DAYS = 5


@dataclass(frozen=True)
class DiarySettings:
    """
    Persistent user preferences relevant to the engine.

    Attributes:
        datafile_path: Diary file opened when none is given explicitly
        period_days: Length of each compared period, in days
        past_periods: Number of periods compared
        max_displayed_cols: Terminal width budget for the presentation layer
        list_previous_days: Number of recent days listed in tabular form
        list_most_frequent_days: Number of top compositions listed
    """

    datafile_path: Path = DB_PATH
    period_days: int = DEFAULT_PERIOD_DAYS
    past_periods: int = DEFAULT_PAST_PERIODS
    max_displayed_cols: int = DEFAULT_MAX_DISPLAYED_COLS
    list_previous_days: int = DEFAULT_LIST_PREVIOUS_DAYS
    list_most_frequent_days: int = DEFAULT_LIST_MOST_FREQUENT_DAYS

    @classmethod
    def from_mapping(cls, values: Optional[Mapping[str, Any]]) -> "DiarySettings":
        """
        Build settings from a flat key-value blob.

        Missing keys keep their defaults and unknown keys are ignored, so
        blobs written by older or newer versions stay readable.

        Args:
            values: Mapping read from the settings file (may be None)

        Returns:
            Validated settings

        Raises:
            ValidationError: If a known key holds an invalid value
        """
        settings = cls()
        if not values:
            return settings

        known = {f.name for f in fields(cls)}
        updates: Dict[str, Any] = {}
        for key, value in values.items():
            if key not in known or value is None:
                continue
            if key == "datafile_path":
                updates[key] = Path(value).expanduser()
            elif key == "list_previous_days":
                # Zero disables the listing
                updates[key] = (
                    0 if value == 0 else DataValidator.normalize_positive_int(value, key)
                )
            else:
                updates[key] = DataValidator.normalize_positive_int(value, key)
        return replace(settings, **updates)

    def to_mapping(self) -> Dict[str, Any]:
        """Return the settings as a flat, serializable mapping."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["datafile_path"] = str(self.datafile_path)
        return data
