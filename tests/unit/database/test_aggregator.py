"""
test_aggregator.py
------------------
Unit tests for Aggregator period comparisons and composition rankings.
"""
import random
from collections import Counter
from datetime import date, timedelta

import pytest

from habitdiary.core.exceptions import ValidationError
from habitdiary.dataclasses import CompositionCount, Period
from habitdiary.database.aggregator import Aggregator


@pytest.fixture
def aggregator(diary):
    return Aggregator(diary)


class TestComparePeriods:
    """Test Aggregator.compare_periods()."""

    def test_entry_counted_in_most_recent_period(self, diary, aggregator):
        diary.upsert_entry(date(2024, 1, 10), {"GAM": True})

        summaries = aggregator.compare_periods(30, 2, until=date(2024, 1, 11))

        assert [s.index for s in summaries] == [0, 1]
        assert summaries[0].period == Period.ending_on(date(2024, 1, 11), 30)
        assert dict(summaries[0].counts) == {"GAM": 1, "PNO": 0}
        assert dict(summaries[1].counts) == {"GAM": 0, "PNO": 0}

    def test_periods_are_consecutive(self, aggregator):
        summaries = aggregator.compare_periods(5, 3, until=date(2000, 5, 30))
        assert [(s.start, s.period.last_day) for s in summaries] == [
            (date(2000, 5, 26), date(2000, 5, 30)),
            (date(2000, 5, 21), date(2000, 5, 25)),
            (date(2000, 5, 16), date(2000, 5, 20)),
        ]

    def test_bucket_boundaries(self, diary, aggregator):
        diary.upsert_entries(
            [
                (date(2000, 5, 30), {"GAM": True}),
                (date(2000, 5, 26), {"GAM": True}),
                (date(2000, 5, 25), {"GAM": True, "PNO": True}),
                (date(2000, 5, 16), {"PNO": True}),
                (date(2000, 5, 15), {"GAM": True}),
                (date(2000, 5, 31), {"GAM": True}),
            ]
        )
        summaries = aggregator.compare_periods(5, 3, until=date(2000, 5, 30))
        assert [dict(s.counts) for s in summaries] == [
            {"GAM": 2, "PNO": 0},
            {"GAM": 1, "PNO": 1},
            {"GAM": 0, "PNO": 1},
        ]

    def test_hidden_categories(self, diary, aggregator):
        diary.upsert_entry(date(2024, 1, 10), {"GAM": True, "PNO": True})
        diary.hide_category("PNO")

        visible = aggregator.compare_periods(7, 1, until=date(2024, 1, 10))
        everything = aggregator.compare_periods(
            7, 1, visible_only=False, until=date(2024, 1, 10)
        )

        assert dict(visible[0].counts) == {"GAM": 1}
        assert dict(everything[0].counts) == {"GAM": 1, "PNO": 1}

    def test_default_until_is_yesterday(self, diary, aggregator):
        yesterday = date.today() - timedelta(days=1)
        diary.upsert_entry(yesterday, {"GAM": True})
        diary.upsert_entry(date.today(), {"GAM": True})

        summaries = aggregator.compare_periods(1, 1)

        assert summaries[0].period.last_day == yesterday
        assert summaries[0].counts["GAM"] == 1

    def test_periods_before_earliest_date(self, aggregator):
        with pytest.raises(ValidationError, match="supported date range"):
            aggregator.compare_periods(10**6, 10**3, until=date(2024, 1, 1))

    @pytest.mark.parametrize("length,count", [(0, 2), (30, 0), (-1, 1)])
    def test_rejects_non_positive(self, aggregator, length, count):
        with pytest.raises(ValidationError):
            aggregator.compare_periods(length, count, until=date(2024, 1, 1))

    def test_is_read_only(self, diary, aggregator):
        aggregator.compare_periods(30, 3, until=date(2024, 1, 1))
        assert diary.is_empty()


class TestMostFrequentCompositions:
    """Test Aggregator.most_frequent_compositions()."""

    def test_ranks_by_count(self, diary, aggregator):
        start = date(2024, 1, 1)
        diary.upsert_entries(
            [(start + timedelta(days=i), {"GAM": True}) for i in range(40)]
            + [(start + timedelta(days=40 + i), {}) for i in range(20)]
        )

        result = aggregator.most_frequent_compositions(Period(start, 60), 5)

        assert result == [
            (frozenset({"GAM"}), 40),
            (frozenset(), 20),
        ]
        assert all(isinstance(item, CompositionCount) for item in result)

    def test_gaps_count_as_empty(self, diary, aggregator):
        diary.upsert_entry(date(2024, 1, 1), {"GAM": True})
        result = aggregator.most_frequent_compositions(Period(date(2024, 1, 1), 3), 5)
        assert result == [(frozenset(), 2), (frozenset({"GAM"}), 1)]

    def test_ties_broken_by_recency(self, diary, aggregator):
        diary.upsert_entries(
            [
                (date(2024, 1, 1), {"PNO": True}),
                (date(2024, 1, 2), {"GAM": True}),
                (date(2024, 1, 3), {"GAM": True}),
                (date(2024, 1, 4), {"PNO": True}),
            ]
        )
        result = aggregator.most_frequent_compositions(Period(date(2024, 1, 1), 4), 2)
        assert result == [(frozenset({"PNO"}), 2), (frozenset({"GAM"}), 2)]

    def test_top_k_limits(self, diary, aggregator):
        diary.upsert_entries(
            [
                (date(2024, 1, 1), {"GAM": True}),
                (date(2024, 1, 2), {"PNO": True}),
                (date(2024, 1, 3), {"GAM": True, "PNO": True}),
            ]
        )
        result = aggregator.most_frequent_compositions(Period(date(2024, 1, 1), 3), 1)
        assert result == [(frozenset({"GAM", "PNO"}), 1)]

    def test_hidden_categories_in_history(self, diary, aggregator):
        diary.upsert_entry(date(2024, 1, 1), {"GAM": True, "PNO": True})
        diary.hide_category("PNO")

        result = aggregator.most_frequent_compositions(Period(date(2024, 1, 1), 1), 1)

        assert result == [(frozenset({"GAM", "PNO"}), 1)]

    @pytest.mark.parametrize("top_k", [0, -5])
    def test_rejects_top_k_below_one(self, aggregator, top_k):
        with pytest.raises(ValidationError):
            aggregator.most_frequent_compositions(Period(date(2024, 1, 1), 1), top_k)

    def test_matches_brute_force(self, diary, aggregator):
        diary.add_category("RUN")
        rng = random.Random(7)
        start = date(2023, 1, 1)
        expected_days = {}
        for offset in range(120):
            if rng.random() < 0.2:
                continue
            flags = {abbr: rng.random() < 0.4 for abbr in ("GAM", "PNO", "RUN")}
            expected_days[start + timedelta(days=offset)] = frozenset(
                abbr for abbr, occurred in flags.items() if occurred
            )
            diary.upsert_entry(start + timedelta(days=offset), flags)

        period = Period(start, 120)
        counts = Counter()
        last_seen = {}
        for day in period:
            composition = expected_days.get(day, frozenset())
            counts[composition] += 1
            last_seen[composition] = day
        expected = sorted(counts.items(), key=lambda item: (-item[1], -last_seen[item[0]].toordinal()))

        result = aggregator.most_frequent_compositions(period, len(counts) + 3)

        assert result == expected
        assert sum(item.count for item in result) == 120
