"""Analytics engine — one call from a habit/completion snapshot to a full report.

Data flow:
  habits + completions (+ cached streaks)
    -> dedupe, drop orphans
    -> streaks, period buckets, category rollup, habit ranking
    -> overall stats
    -> insights

Everything is a pure computation over the arguments: no I/O, no module
state, safe to call from several threads as long as each call owns its
inputs.
"""

import logging
from datetime import date

from habitlens.aggregation import aggregate_periods, dedupe_completions, in_window, mean_rate
from habitlens.categories import category_stats
from habitlens.config import ANALYTICS_DAYS
from habitlens.insights import generate_insights
from habitlens.models import (
    AnalyticsReport,
    Completion,
    DailyStats,
    Habit,
    HabitPerformance,
    OverallStats,
    Streak,
)
from habitlens.performance import habit_performance
from habitlens.streaks import calculate_streaks, local_today

log = logging.getLogger(__name__)


def overall_stats(
    completions: list[Completion],
    daily: list[DailyStats],
    performance: list[HabitPerformance],
    streaks: dict[str, Streak],
    today: date,
    days: int = ANALYTICS_DAYS,
) -> OverallStats:
    # First day reaching the top rate; a window of all-zero days has no best day
    best = None
    for d in daily:
        if d.rate > (best.rate if best else 0):
            best = d

    return OverallStats(
        total_completions=len(in_window(dedupe_completions(completions), days, today)),
        average_rate=mean_rate(d.rate for d in daily),
        best_day=best.date if best else None,
        best_day_rate=best.rate if best else 0,
        current_overall_streak=max((s.current_streak for s in streaks.values()), default=0),
        longest_overall_streak=max((s.longest_streak for s in streaks.values()), default=0),
        most_consistent_habit=performance[0].habit.name if performance else None,
        least_consistent_habit=performance[-1].habit.name if performance else None,
    )


def compute_analytics(
    habits: list[Habit],
    completions: list[Completion],
    streaks: dict[str, Streak] | None = None,
    days: int = ANALYTICS_DAYS,
    today: date | None = None,
) -> AnalyticsReport:
    """Build the full analytics report for a snapshot.

    Args:
        habits: Habits to report on (the caller decides which are active)
        completions: Completion records; duplicates per (habit, date) and
            completions of habits outside `habits` are ignored
        streaks: Previously stored streaks by habit id. Current streaks are
            recomputed from completions; stored longest streaks are kept as
            a floor so records never regress.
        days: Horizon in days
        today: Reference day, defaults to today in the configured timezone
    """
    if today is None:
        today = local_today()

    habit_ids = {h.id for h in habits}
    unique = dedupe_completions(completions)
    known = [c for c in unique if c.habit_id in habit_ids]
    if len(known) != len(completions):
        log.debug(
            "Ignoring %d duplicate and %d orphan completions",
            len(completions) - len(unique), len(unique) - len(known),
        )

    streak_map = calculate_streaks(habits, known, previous=streaks, today=today)
    daily, weekly, monthly = aggregate_periods(len(habits), known, today, days)
    categories = category_stats(habits, known, today, days)
    performance = habit_performance(habits, known, streak_map, today, days)
    overall = overall_stats(known, daily, performance, streak_map, today, days)

    insights = generate_insights(
        average_rate=overall.average_rate,
        current_overall_streak=overall.current_overall_streak,
        longest_overall_streak=overall.longest_overall_streak,
        performance=performance,
        daily=daily,
        categories=categories,
        weekly=weekly,
    )

    log.debug(
        "Analytics for %d habits, %d completions over %d days: avg %d%%, %d insights",
        len(habits), len(known), days, overall.average_rate, len(insights),
    )
    return AnalyticsReport(
        days=days,
        today=today,
        daily_stats=daily,
        weekly_stats=weekly,
        monthly_stats=monthly,
        category_stats=categories,
        habit_performance=performance,
        streaks=streak_map,
        insights=insights,
        overall=overall,
    )
