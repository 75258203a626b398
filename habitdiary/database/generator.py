#!/usr/bin/env python3
"""
generator.py
--------------------
Synthetic diary data for demos and load tests.

Creates a new diary and records a run of consecutive days ending on a
given date, each category occurring independently with a fixed
probability. A seed makes the output reproducible.

Usage:
    diary = generate_diary(
        "demo.db", ["GAM", "PNO", "RUN"], days=365, until=date(2024, 12, 31), seed=1
    )
"""
import random
from datetime import date, timedelta
from pathlib import Path
from typing import Iterable, Optional, Union

from habitdiary.core.exceptions import ValidationError
from habitdiary.core.validators import DataValidator
from .manager import Diary


def generate_diary(
    path: Union[str, Path],
    categories: Iterable[str],
    days: int,
    until: Optional[date] = None,
    probability: float = 0.5,
    seed: Optional[int] = None,
    log_dir: Optional[Union[str, Path]] = None,
) -> Diary:
    """
    Create a diary filled with random entries.

    Args:
        path: Target file; must not exist
        categories: Abbreviations to create, in display order
        days: Number of consecutive days recorded, at least 1
        until: Last recorded day (default: today)
        probability: Chance that a category occurs on a given day
        seed: Random seed for reproducible data
        log_dir: Directory for log files (optional)

    Returns:
        The open diary

    Raises:
        ValidationError: If days or probability is out of range
        CreateError: If a file exists at path
    """
    days = DataValidator.normalize_positive_int(days, "days")
    until = date.today() if until is None else DataValidator.normalize_date(until)
    if not 0.0 <= probability <= 1.0:
        raise ValidationError(f"'probability' must be between 0 and 1, got {probability}")

    diary = Diary.create(path, categories, log_dir=log_dir)
    abbreviations = [c.abbreviation for c in diary.list_categories()]
    rng = random.Random(seed)

    first_day = until - timedelta(days=days - 1)
    rows = [
        (
            first_day + timedelta(days=offset),
            {abbr: rng.random() < probability for abbr in abbreviations},
        )
        for offset in range(days)
    ]
    try:
        diary.upsert_entries(rows)
    except Exception:
        diary.close()
        raise
    return diary
