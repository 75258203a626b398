#!/usr/bin/env python3
"""
export_manager.py
-----------------
Legacy CSV exchange for diary files.

Older versions of the tracker kept the whole diary in one CSV file. The
format is still used to move data in and out of a diary:

    date,GAM,PNO
    2024-01-10,x,
    2024-01-11,,x

The header lists every category in display order, hidden ones included.
Each row is one recorded day; any non-blank cell means the habit
occurred (``x`` is written on export). Days without a row are simply
not recorded.

Key Features:
    - Export writes through a temporary file and renames it into place
    - Import validates the whole file before writing anything
    - Header categories missing from the diary are added on import
    - Errors name the offending line

Usage:
    from habitdiary.database.export_manager import ExportManager

    exporter = ExportManager(logger=diary.logger)
    exporter.export_csv(diary, Path("habits.csv"))
    exporter.import_csv(diary, Path("old_habits.csv"))
"""
import csv
import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from habitdiary.core.exceptions import ExchangeError, ValidationError
from habitdiary.core.logging_manager import DiaryLogger, safe_logger
from habitdiary.core.validators import DataValidator
from habitdiary.dataclasses import Period
from .decorators import log_database_operation
from .managers import fold_abbreviation
from .manager import Diary

DATE_COLUMN = "date"
OCCURRED_MARK = "x"


class ExportManager:
    """
    Reads and writes the legacy CSV format.
    """

    def __init__(self, logger: Optional[DiaryLogger] = None) -> None:
        """
        Initialize export manager.

        Args:
            logger: Optional logger for exchange operations
        """
        self.logger = logger

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    @log_database_operation("export_csv")
    def export_csv(self, diary: Diary, path: Union[str, Path]) -> int:
        """
        Write every recorded day of a diary to a CSV file.

        Args:
            diary: Diary to export
            path: Output file; replaced if it exists

        Returns:
            Number of day rows written

        Raises:
            ExchangeError: If the file cannot be written
        """
        path = Path(path).expanduser()
        abbreviations = [c.abbreviation for c in diary.list_categories(include_hidden=True)]
        bounds = diary.date_bounds()

        rows = 0
        temp_path: Optional[Path] = None
        try:
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
            )
            temp_path = Path(temp_name)
            with os.fdopen(fd, "w", newline="", encoding="utf-8") as csvfile:
                writer = csv.writer(csvfile, lineterminator="\n")
                writer.writerow([DATE_COLUMN, *abbreviations])
                if bounds is not None:
                    for entry in diary.iter_entries(Period.between(*bounds)):
                        if not entry.recorded:
                            continue
                        writer.writerow(
                            [entry.date.isoformat()]
                            + [
                                OCCURRED_MARK if entry.occurred(abbr) else ""
                                for abbr in abbreviations
                            ]
                        )
                        rows += 1
            temp_path.replace(path)
        except OSError as e:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise ExchangeError(f"Cannot write CSV file {path}: {e}") from e

        safe_logger(self.logger).log_operation(
            "csv_exported",
            {"path": str(path), "rows": rows, "categories": len(abbreviations)},
        )
        return rows

    # -------------------------------------------------------------------------
    # Import
    # -------------------------------------------------------------------------

    def _read_header(self, row: List[str]) -> List[str]:
        """Category abbreviations of the header row (line 1)."""
        if not row or row[0].strip().lower() != DATE_COLUMN:
            raise ExchangeError(f"Line 1: header must start with '{DATE_COLUMN}'")

        abbreviations = []
        seen = set()
        for cell in row[1:]:
            try:
                abbreviation = DataValidator.normalize_abbreviation(cell)
            except ValidationError as e:
                raise ExchangeError(f"Line 1: {e}") from e
            if fold_abbreviation(abbreviation) in seen:
                raise ExchangeError(f"Line 1: duplicate category '{abbreviation}'")
            seen.add(fold_abbreviation(abbreviation))
            abbreviations.append(abbreviation)
        return abbreviations

    def read_csv(
        self, path: Union[str, Path]
    ) -> Tuple[List[str], List[Tuple[date, Dict[str, bool]]]]:
        """
        Parse a CSV file without touching any diary.

        Args:
            path: Input file

        Returns:
            (header abbreviations, [(day, flags), ...] in file order)

        Raises:
            ExchangeError: If the file is unreadable, a date is malformed
                or repeated, or a row has the wrong number of columns
        """
        path = Path(path).expanduser()
        rows: List[Tuple[date, Dict[str, bool]]] = []
        seen_dates: Dict[date, int] = {}

        try:
            with open(path, "r", newline="", encoding="utf-8") as csvfile:
                reader = csv.reader(csvfile)
                header_row = next(reader, None)
                if header_row is None:
                    raise ExchangeError(f"CSV file is empty: {path}")
                abbreviations = self._read_header(header_row)

                for row in reader:
                    line = reader.line_num
                    if not row or (len(row) == 1 and not row[0].strip()):
                        continue

                    date_str = row[0].strip()
                    try:
                        day = date.fromisoformat(date_str)
                    except ValueError as e:
                        raise ExchangeError(
                            f"Line {line}: cannot parse date '{date_str}'"
                        ) from e
                    if day in seen_dates:
                        raise ExchangeError(
                            f"Line {line}: duplicate date {day} "
                            f"(first seen on line {seen_dates[day]})"
                        )
                    seen_dates[day] = line

                    values = row[1:]
                    if len(values) != len(abbreviations):
                        raise ExchangeError(
                            f"Line {line}: {len(values)} values, "
                            f"header has {len(abbreviations)} categories"
                        )
                    rows.append(
                        (
                            day,
                            {
                                abbr: bool(value.strip())
                                for abbr, value in zip(abbreviations, values)
                            },
                        )
                    )
        except OSError as e:
            raise ExchangeError(f"Cannot read CSV file {path}: {e}") from e
        except csv.Error as e:
            raise ExchangeError(f"Malformed CSV file {path}: {e}") from e

        return abbreviations, rows

    @log_database_operation("import_csv")
    def import_csv(self, diary: Diary, path: Union[str, Path]) -> int:
        """
        Load a CSV file into a diary in one transaction.

        Header categories unknown to the diary are appended; hidden
        categories stay hidden. Every row replaces the day it names.

        Args:
            diary: Target diary
            path: Input file

        Returns:
            Number of days written

        Raises:
            ExchangeError: If the file is malformed; the diary is unchanged
        """
        abbreviations, rows = self.read_csv(path)

        with diary.session_scope():
            known = {
                fold_abbreviation(category.abbreviation)
                for category in diary.categories.get_all(include_hidden=True)
            }
            added = []
            for abbreviation in abbreviations:
                if fold_abbreviation(abbreviation) not in known:
                    diary.categories.add(abbreviation)
                    added.append(abbreviation)
            written = diary.entries.upsert_many(rows)

        safe_logger(self.logger).log_operation(
            "csv_imported",
            {"path": str(path), "days": written, "added_categories": added},
        )
        return written
