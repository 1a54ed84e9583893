"""Period aggregator — daily, weekly and monthly completion buckets.

Buckets are built backwards from "today" over a horizon of `days` days:

  daily    one bucket per calendar day, oldest first
  weekly   ceil(days / 7) trailing 7-day windows ending on today, not Mon-Sun weeks
  monthly  ceil(days / 30) calendar months ending with the current month

Every habit counts as due every day here (target weekdays are ignored), so
total_possible is habit_count x days-in-bucket.
"""

import calendar
import logging
from collections import Counter
from datetime import date, timedelta
from typing import Iterable

from habitlens.config import ANALYTICS_DAYS
from habitlens.models import Completion, DailyStats, MonthlyStats, WeeklyStats

log = logging.getLogger(__name__)


def completion_rate(completions: int, total_possible: int) -> int:
    """Percentage rounded half-up, 0 when nothing was possible, capped at 100."""
    if total_possible <= 0 or completions <= 0:
        return 0
    rate = (200 * completions + total_possible) // (2 * total_possible)
    return min(rate, 100)


def mean_rate(rates: Iterable[int]) -> int:
    """Rounded mean of integer rates, 0 for an empty sequence."""
    rates = list(rates)
    return completion_rate(sum(rates), 100 * len(rates))


def dedupe_completions(completions: Iterable[Completion]) -> list[Completion]:
    """Keep the first completion per (habit_id, date); order is preserved."""
    seen = set()
    unique = []
    for c in completions:
        key = (c.habit_id, c.completed_date)
        if key in seen:
            continue
        seen.add(key)
        unique.append(c)
    return unique


def in_window(completions: list[Completion], days: int, today: date) -> list[Completion]:
    """Completions dated within the `days` days ending on today."""
    start = today - timedelta(days=days - 1)
    return [c for c in completions if start <= c.completed_date <= today]


def _count_by_date(completions: Iterable[Completion]) -> Counter:
    return Counter(c.completed_date for c in completions)


def daily_stats(
    habit_count: int,
    completions: list[Completion],
    today: date,
    days: int = ANALYTICS_DAYS,
) -> list[DailyStats]:
    by_date = _count_by_date(dedupe_completions(completions))
    result = []
    for i in range(days - 1, -1, -1):
        d = today - timedelta(days=i)
        count = by_date.get(d, 0)
        result.append(DailyStats(
            date=d,
            completions=count,
            total=habit_count,
            rate=completion_rate(count, habit_count),
        ))
    return result


def weekly_stats(
    habit_count: int,
    completions: list[Completion],
    today: date,
    days: int = ANALYTICS_DAYS,
) -> list[WeeklyStats]:
    by_date = _count_by_date(dedupe_completions(completions))
    weeks = -(-days // 7) if days > 0 else 0
    total_possible = habit_count * 7

    result = []
    for i in range(weeks - 1, -1, -1):
        end = today - timedelta(days=7 * i)
        start = end - timedelta(days=6)
        count = sum(n for d, n in by_date.items() if start <= d <= end)
        result.append(WeeklyStats(
            week=f"Week {weeks - i}",
            start_date=start,
            end_date=end,
            completions=count,
            total=total_possible,
            rate=completion_rate(count, total_possible),
        ))
    return result


def _shift_month(year: int, month: int, back: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) - back
    return index // 12, index % 12 + 1


def monthly_stats(
    habit_count: int,
    completions: list[Completion],
    today: date,
    days: int = ANALYTICS_DAYS,
) -> list[MonthlyStats]:
    """Whole calendar months, so the oldest bucket may start before the horizon."""
    by_month = Counter(
        (c.completed_date.year, c.completed_date.month)
        for c in dedupe_completions(completions)
    )
    months = -(-days // 30) if days > 0 else 0

    result = []
    for i in range(months - 1, -1, -1):
        year, month = _shift_month(today.year, today.month, i)
        days_in_month = calendar.monthrange(year, month)[1]
        total_possible = habit_count * days_in_month
        count = by_month.get((year, month), 0)
        result.append(MonthlyStats(
            month=date(year, month, 1).strftime("%b"),
            year=year,
            completions=count,
            total=total_possible,
            rate=completion_rate(count, total_possible),
        ))
    return result


def aggregate_periods(
    habit_count: int,
    completions: list[Completion],
    today: date,
    days: int = ANALYTICS_DAYS,
) -> tuple[list[DailyStats], list[WeeklyStats], list[MonthlyStats]]:
    """All three bucket sequences over the same deduplicated snapshot."""
    unique = dedupe_completions(completions)
    if len(unique) != len(completions):
        log.debug("Dropped %d duplicate completions", len(completions) - len(unique))
    return (
        daily_stats(habit_count, unique, today, days),
        weekly_stats(habit_count, unique, today, days),
        monthly_stats(habit_count, unique, today, days),
    )
