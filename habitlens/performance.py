"""Habit performance ranker."""

import logging
from datetime import date

from habitlens.aggregation import completion_rate, dedupe_completions, in_window
from habitlens.config import ANALYTICS_DAYS
from habitlens.models import Completion, Habit, HabitPerformance, Streak

log = logging.getLogger(__name__)


def habit_performance(
    habits: list[Habit],
    completions: list[Completion],
    streaks: dict[str, Streak],
    today: date,
    days: int = ANALYTICS_DAYS,
) -> list[HabitPerformance]:
    """Per-habit completion rate over the horizon, best first.

    Every habit has `days` opportunities regardless of its target weekdays.
    Ties keep input order (sorted() is stable, also with reverse=True).
    """
    counts = dict.fromkeys((h.id for h in habits), 0)
    for c in in_window(dedupe_completions(completions), days, today):
        if c.habit_id in counts:
            counts[c.habit_id] += 1

    total_possible = max(days, 0)
    ranked = []
    for habit in habits:
        streak = streaks.get(habit.id)
        ranked.append(HabitPerformance(
            habit=habit,
            completions=counts[habit.id],
            total_possible=total_possible,
            rate=completion_rate(counts[habit.id], total_possible),
            current_streak=streak.current_streak if streak else 0,
            longest_streak=streak.longest_streak if streak else 0,
        ))

    log.debug("Ranked %d habits over %d days", len(ranked), days)
    return sorted(ranked, key=lambda p: p.rate, reverse=True)
