"""Tests for the period aggregator and the shared rate rule."""

from datetime import date, timedelta

from habitlens.aggregation import (
    aggregate_periods,
    completion_rate,
    daily_stats,
    dedupe_completions,
    in_window,
    mean_rate,
    monthly_stats,
    weekly_stats,
)
from habitlens.models import Completion

TODAY = date(2024, 3, 15)


def _done(habit_id: str, *days_ago: int) -> list[Completion]:
    return [
        Completion(habit_id=habit_id, completed_date=TODAY - timedelta(days=n))
        for n in days_ago
    ]


# ═══════════════════════════════════════════════════════════════════════════
# Rate rule
# ═══════════════════════════════════════════════════════════════════════════

class TestCompletionRate:
    def test_zero_possible(self):
        assert completion_rate(0, 0) == 0
        assert completion_rate(5, 0) == 0

    def test_rounding(self):
        assert completion_rate(1, 3) == 33
        assert completion_rate(2, 3) == 67
        assert completion_rate(1, 2) == 50

    def test_half_rounds_up(self):
        # 12.5% and 62.5%
        assert completion_rate(1, 8) == 13
        assert completion_rate(5, 8) == 63

    def test_bounds(self):
        assert completion_rate(0, 7) == 0
        assert completion_rate(7, 7) == 100
        assert completion_rate(9, 7) == 100

    def test_mean_rate(self):
        assert mean_rate([]) == 0
        assert mean_rate([80, 50]) == 65
        assert mean_rate([0, 0, 1]) == 0
        assert mean_rate([100, 100, 50]) == 83


class TestDedupe:
    def test_keeps_first_per_habit_and_date(self):
        first = Completion(habit_id="a", completed_date=TODAY, id="1")
        dup = Completion(habit_id="a", completed_date=TODAY, id="2")
        other = Completion(habit_id="b", completed_date=TODAY, id="3")
        assert dedupe_completions([first, dup, other]) == [first, other]

    def test_window(self):
        completions = _done("a", 0, 6, 7)
        assert [c.completed_date for c in in_window(completions, 7, TODAY)] == [
            TODAY, TODAY - timedelta(days=6),
        ]


# ═══════════════════════════════════════════════════════════════════════════
# Buckets
# ═══════════════════════════════════════════════════════════════════════════

class TestDailyStats:
    def test_one_bucket_per_day_oldest_first(self):
        daily = daily_stats(2, [], TODAY, days=90)
        assert len(daily) == 90
        assert daily[0].date == TODAY - timedelta(days=89)
        assert daily[-1].date == TODAY
        assert all(d.total == 2 and d.rate == 0 for d in daily)

    def test_counts_and_rate(self):
        completions = _done("a", 0, 1) + _done("b", 0)
        daily = daily_stats(2, completions, TODAY, days=3)
        assert [d.completions for d in daily] == [0, 1, 2]
        assert [d.rate for d in daily] == [0, 50, 100]

    def test_no_habits_means_zero_rate(self):
        daily = daily_stats(0, _done("a", 0), TODAY, days=2)
        assert [d.rate for d in daily] == [0, 0]

    def test_duplicates_count_once(self):
        single = daily_stats(1, _done("a", 0), TODAY, days=7)
        doubled = daily_stats(1, _done("a", 0, 0), TODAY, days=7)
        assert single == doubled
        assert doubled[-1].rate == 100


class TestWeeklyStats:
    def test_trailing_windows(self):
        weekly = weekly_stats(1, [], TODAY, days=90)
        assert len(weekly) == 13
        assert weekly[0].week == "Week 1"
        assert weekly[-1].week == "Week 13"
        assert weekly[-1].end_date == TODAY
        assert weekly[-1].start_date == TODAY - timedelta(days=6)
        assert weekly[-2].end_date == TODAY - timedelta(days=7)
        assert all(w.total == 7 for w in weekly)

    def test_partial_horizon_rounds_up(self):
        assert len(weekly_stats(1, [], TODAY, days=8)) == 2
        assert len(weekly_stats(1, [], TODAY, days=7)) == 1

    def test_counts(self):
        # 0..6 fall in the last week, 7 and 13 in the one before
        completions = _done("a", 0, 3, 6, 7, 13) + _done("b", 1)
        weekly = weekly_stats(2, completions, TODAY, days=14)
        assert [w.completions for w in weekly] == [2, 4]
        assert [w.rate for w in weekly] == [14, 29]


class TestMonthlyStats:
    def test_calendar_months_ending_with_current(self):
        monthly = monthly_stats(2, [], TODAY, days=90)
        assert [(m.month, m.year) for m in monthly] == [
            ("Jan", 2024), ("Feb", 2024), ("Mar", 2024),
        ]
        # 2024 is a leap year
        assert [m.total for m in monthly] == [62, 58, 62]

    def test_year_wraps(self):
        monthly = monthly_stats(1, [], date(2024, 1, 10), days=60)
        assert [(m.month, m.year) for m in monthly] == [("Dec", 2023), ("Jan", 2024)]

    def test_counts_whole_month(self):
        completions = [
            Completion(habit_id="a", completed_date=date(2024, 2, 1)),
            Completion(habit_id="a", completed_date=date(2024, 2, 29)),
            Completion(habit_id="a", completed_date=date(2024, 3, 1)),
        ]
        monthly = monthly_stats(1, completions, TODAY, days=60)
        assert [m.completions for m in monthly] == [2, 1]
        assert monthly[0].rate == 7


class TestAggregatePeriods:
    def test_idempotent(self):
        completions = _done("a", 0, 1, 2, 10, 40) + _done("b", 5, 5)
        first = aggregate_periods(2, completions, TODAY, days=90)
        second = aggregate_periods(2, completions, TODAY, days=90)
        assert first == second

    def test_zero_horizon(self):
        assert aggregate_periods(1, _done("a", 0), TODAY, days=0) == ([], [], [])

    def test_rates_stay_in_bounds(self):
        completions = _done("a", *range(90)) + _done("b", *range(0, 90, 2))
        daily, weekly, monthly = aggregate_periods(2, completions, TODAY, days=90)
        for bucket in [*daily, *weekly, *monthly]:
            assert 0 <= bucket.rate <= 100
