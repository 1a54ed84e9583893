"""HabitLens — main entry point.

1. Database initialization
2. Snapshot load (active habits, completions, cached streaks)
3. Analytics report
4. Log overall stats and insights

Run with: python -m habitlens.main
"""

import logging
from datetime import timedelta

from habitlens.config import ANALYTICS_DAYS, LOG_LEVEL
from habitlens.db import init_db, get_habits, get_completions, get_streaks
from habitlens.engine import compute_analytics
from habitlens.models import AnalyticsReport, Completion, Habit, Streak
from habitlens.streaks import local_today

log = logging.getLogger("habitlens")


def build_report(days: int = ANALYTICS_DAYS) -> AnalyticsReport:
    """Load the current snapshot from the store and run the engine on it."""
    today = local_today()
    habits = [Habit.from_row(r) for r in get_habits()]
    # Full history, so streaks see runs older than the horizon
    completions = [Completion.from_row(r) for r in get_completions(end=today)]
    streaks = {s.habit_id: s for s in (Streak.from_row(r) for r in get_streaks())}
    log.info(
        "Snapshot: %d habits, %d completions, %d cached streaks",
        len(habits), len(completions), len(streaks),
    )
    return compute_analytics(habits, completions, streaks, days=days, today=today)


def log_report(report: AnalyticsReport) -> None:
    o = report.overall
    start = report.today - timedelta(days=report.days - 1)
    log.info("Period: %s .. %s (%d days)", start, report.today, report.days)
    log.info("Completions: %d, average rate: %d%%", o.total_completions, o.average_rate)
    if o.best_day:
        log.info("Best day: %s (%d%%)", o.best_day, o.best_day_rate)
    log.info(
        "Streaks: current best %d, longest ever %d",
        o.current_overall_streak, o.longest_overall_streak,
    )
    for c in report.category_stats:
        log.info("  %-14s %2d habits %4d done %3d%%", c.category, c.habit_count, c.completions, c.rate)
    for p in report.habit_performance:
        log.info("  %-20s %3d%%  streak %d (best %d)", p.habit.name, p.rate,
                 p.current_streak, p.longest_streak)
    if not report.insights:
        log.info("No insights yet")
    for i in report.insights:
        log.info("[%s] %s: %s", i.type, i.title, i.description)


def main():
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)-5s %(name)s — %(message)s",
        datefmt="%H:%M:%S",
    )
    init_db()
    log_report(build_report())


if __name__ == "__main__":
    main()
