"""
test_validators.py
------------------
Unit tests for DataValidator normalization at the store boundary.
"""
import pytest
from datetime import date, datetime

from habitdiary.core.exceptions import ValidationError
from habitdiary.core.validators import DataValidator


class TestNormalizeAbbreviation:
    """Test DataValidator.normalize_abbreviation()."""

    def test_strips_whitespace(self):
        assert DataValidator.normalize_abbreviation("  GAM ") == "GAM"

    def test_keeps_letter_case(self):
        assert DataValidator.normalize_abbreviation("Gam") == "Gam"

    @pytest.mark.parametrize("value", ["", "   ", "\t"])
    def test_rejects_empty(self, value):
        with pytest.raises(ValidationError, match="cannot be empty"):
            DataValidator.normalize_abbreviation(value)

    @pytest.mark.parametrize("value", ["A,B", "A\nB", "A\rB"])
    def test_rejects_csv_breaking_characters(self, value):
        with pytest.raises(ValidationError, match="forbidden character"):
            DataValidator.normalize_abbreviation(value)

    def test_rejects_non_string(self):
        with pytest.raises(ValidationError, match="must be a string"):
            DataValidator.normalize_abbreviation(42)


class TestNormalizeDate:
    """Test DataValidator.normalize_date()."""

    def test_date_passthrough(self):
        assert DataValidator.normalize_date(date(2024, 1, 10)) == date(2024, 1, 10)

    def test_datetime_uses_date_part(self):
        result = DataValidator.normalize_date(datetime(2024, 1, 10, 23, 59))
        assert result == date(2024, 1, 10)
        assert type(result) is date

    def test_iso_string(self):
        assert DataValidator.normalize_date(" 2024-01-10 ") == date(2024, 1, 10)

    def test_invalid_string(self):
        with pytest.raises(ValidationError, match="Invalid date format"):
            DataValidator.normalize_date("2024-02-30")

    def test_invalid_type(self):
        with pytest.raises(ValidationError, match="Invalid date type"):
            DataValidator.normalize_date(20240110)


class TestNormalizeBool:
    """Test DataValidator.normalize_bool()."""

    @pytest.mark.parametrize("value", [True, 1, "true", "YES", "on", "x", " 1 "])
    def test_truthy(self, value):
        assert DataValidator.normalize_bool(value) is True

    @pytest.mark.parametrize("value", [False, 0, "false", "No", "off", "", None])
    def test_falsy(self, value):
        assert DataValidator.normalize_bool(value) is False

    @pytest.mark.parametrize("value", [2, "maybe", [True]])
    def test_rejects_other_values(self, value):
        with pytest.raises(ValidationError):
            DataValidator.normalize_bool(value)


class TestNormalizePositiveInt:
    """Test DataValidator.normalize_positive_int()."""

    def test_accepts_int_and_numeric_string(self):
        assert DataValidator.normalize_positive_int(7, "period_length") == 7
        assert DataValidator.normalize_positive_int("7", "period_length") == 7

    @pytest.mark.parametrize("value", [0, -3])
    def test_rejects_below_one(self, value):
        with pytest.raises(ValidationError, match="at least 1"):
            DataValidator.normalize_positive_int(value, "top_k")

    @pytest.mark.parametrize("value", [True, 2.5, "seven", None])
    def test_rejects_non_integers(self, value):
        with pytest.raises(ValidationError, match="must be an integer"):
            DataValidator.normalize_positive_int(value, "top_k")
