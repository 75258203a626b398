#!/usr/bin/env python3
"""
validators.py
--------------------
Data validation and normalization utilities for diary operations.

Every value entering the store (category abbreviations, dates, flag
values, counts) is normalized here once; downstream code trusts it.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any

from .exceptions import ValidationError

# Characters that would break the legacy CSV exchange format
FORBIDDEN_ABBREVIATION_CHARS = (",", "\n", "\r")


class DataValidator:
    """Centralized data validation for diary operations."""

    @staticmethod
    def normalize_abbreviation(value: Any) -> str:
        """
        Validate and normalize a category abbreviation.

        Args:
            value: Candidate abbreviation

        Returns:
            Abbreviation with surrounding whitespace removed

        Raises:
            ValidationError: If the value is not a non-empty string or
                contains a comma or line break
        """
        if not isinstance(value, str):
            raise ValidationError(
                f"Category abbreviation must be a string, got {type(value).__name__}"
            )
        abbreviation = value.strip()
        if not abbreviation:
            raise ValidationError("Category abbreviation cannot be empty")
        if any(char in abbreviation for char in FORBIDDEN_ABBREVIATION_CHARS):
            raise ValidationError(
                f"Category abbreviation contains a forbidden character: {value!r}"
            )
        return abbreviation

    @staticmethod
    def normalize_date(date_value: Any) -> date:
        """
        Normalize various date inputs to a date object.

        Args:
            date_value: ISO date string, date object, or datetime

        Returns:
            Calendar day without time component

        Raises:
            ValidationError: If the value cannot be read as a date
        """
        # datetime is a subclass of date, check it first
        if isinstance(date_value, datetime):
            return date_value.date()
        if isinstance(date_value, date):
            return date_value
        if isinstance(date_value, str):
            try:
                return date.fromisoformat(date_value.strip())
            except ValueError as e:
                raise ValidationError(f"Invalid date format: {date_value}") from e
        raise ValidationError(f"Invalid date type: {type(date_value)}")

    @staticmethod
    def normalize_bool(value: Any) -> bool:
        """
        Convert various inputs to boolean.

        Args:
            value: Value to convert

        Returns:
            Boolean value

        Raises:
            ValidationError: If conversion fails
        """
        if isinstance(value, bool):
            return value
        elif isinstance(value, (int, float)):
            if value == 0:
                return False
            elif value == 1:
                return True
            raise ValidationError(f"Cannot convert numeric '{value}' to boolean")
        elif isinstance(value, str):
            if value.strip().lower() in ("true", "1", "yes", "on", "x"):
                return True
            elif value.strip().lower() in ("false", "0", "no", "off", ""):
                return False
            raise ValidationError(f"Cannot convert '{value}' to boolean")
        elif value is None:
            return False
        raise ValidationError(f"Cannot convert {type(value).__name__} to boolean")

    @staticmethod
    def normalize_positive_int(value: Any, field_name: str) -> int:
        """
        Convert value to a strictly positive integer.

        Args:
            value: Value to convert
            field_name: Name used in the error message

        Returns:
            Integer value >= 1

        Raises:
            ValidationError: If value is not an integer or is < 1
        """
        if isinstance(value, bool):
            raise ValidationError(f"'{field_name}' must be an integer, got bool")
        try:
            number = int(value)
        except (TypeError, ValueError) as e:
            raise ValidationError(
                f"'{field_name}' must be an integer, got {value!r}"
            ) from e
        if number != value and not isinstance(value, str):
            raise ValidationError(f"'{field_name}' must be an integer, got {value!r}")
        if number < 1:
            raise ValidationError(f"'{field_name}' must be at least 1, got {number}")
        return number
