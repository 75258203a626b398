"""
Value types exchanged between the diary engine and its callers.

Usage:
    from habitdiary.dataclasses import Category, DiaryEntry, Period
"""
from .category import Category
from .diary_entry import DiaryEntry
from .period import Period, period_ranges
from .statistics import CompositionCount, PeriodSummary

__all__ = [
    "Category",
    "DiaryEntry",
    "Period",
    "period_ranges",
    "PeriodSummary",
    "CompositionCount",
]
