"""
test_category_manager.py
------------------------
Unit tests for CategoryManager operations.

The ``diary`` fixture seeds GAM (order 0) and PNO (order 1).
"""
import pytest

from habitdiary.core.exceptions import (
    CategoryNotFound,
    DuplicateCategory,
    ValidationError,
)
from habitdiary.database.models import HabitCategory


class TestCategoryManagerGet:
    """Test CategoryManager.get() and find()."""

    def test_get_is_case_insensitive(self, category_manager):
        category = category_manager.get("gam")
        assert category.abbreviation == "GAM"
        assert category.display_order == 0
        assert category.hidden is False

    def test_get_missing_raises(self, category_manager):
        with pytest.raises(CategoryNotFound) as exc_info:
            category_manager.get("RUN")
        assert exc_info.value.abbreviation == "RUN"

    def test_find_returns_none_when_missing(self, category_manager):
        assert category_manager.find("RUN") is None


class TestCategoryManagerGetAll:
    """Test CategoryManager.get_all()."""

    def test_ordered_by_display_order(self, category_manager):
        category_manager.add("RUN")
        assert [c.abbreviation for c in category_manager.get_all()] == ["GAM", "PNO", "RUN"]

    def test_excludes_hidden_on_request(self, category_manager):
        category_manager.hide("GAM")
        assert [c.abbreviation for c in category_manager.get_all(include_hidden=False)] == ["PNO"]
        assert [c.abbreviation for c in category_manager.get_all(include_hidden=True)] == ["GAM", "PNO"]


class TestCategoryManagerAdd:
    """Test CategoryManager.add()."""

    def test_appends_at_end(self, category_manager, db_session):
        category_id = category_manager.add("RUN")
        created = db_session.get(HabitCategory, category_id)
        assert created.display_order == 2
        assert created.hidden is False

    def test_strips_abbreviation(self, category_manager):
        category_manager.add("  RUN ")
        assert category_manager.get("RUN").abbreviation == "RUN"

    @pytest.mark.parametrize("abbreviation", ["GAM", "gam", " Gam "])
    def test_duplicate_visible_raises(self, category_manager, abbreviation):
        with pytest.raises(DuplicateCategory):
            category_manager.add(abbreviation)
        assert len(category_manager.get_all()) == 2

    def test_readding_hidden_unhides_in_place(self, category_manager):
        original = category_manager.get("PNO")
        category_manager.hide("PNO")
        category_manager.add("RUN")

        category_id = category_manager.add("pno")

        restored = category_manager.get("PNO")
        assert category_id == original.id
        assert restored.hidden is False
        assert restored.display_order == original.display_order
        assert [c.abbreviation for c in category_manager.get_all()] == ["GAM", "PNO", "RUN"]

    def test_malformed_abbreviation(self, category_manager):
        with pytest.raises(ValidationError):
            category_manager.add("A,B")

    def test_logs_operation(self, db_session, mock_logger):
        from habitdiary.database.managers import CategoryManager

        CategoryManager(db_session, mock_logger).add("RUN")
        names = [c[0][0] for c in mock_logger.log_operation.call_args_list]
        assert "add_category_completed" in names


class TestCategoryManagerHide:
    """Test CategoryManager.hide()."""

    def test_hide_visible(self, category_manager):
        assert category_manager.hide("gam") is True
        hidden = category_manager.get("GAM")
        assert hidden.hidden is True
        assert hidden.display_order == 0

    def test_hide_already_hidden_is_noop(self, category_manager):
        category_manager.hide("GAM")
        assert category_manager.hide("GAM") is False
        assert category_manager.get("GAM").hidden is True

    def test_hide_missing_raises(self, category_manager):
        with pytest.raises(CategoryNotFound):
            category_manager.hide("RUN")
