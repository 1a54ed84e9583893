"""Category rollup — completions per habit category over the horizon.

Completions are attributed through each habit's *current* category. If a
habit is re-categorised, its whole history moves with it; there is no
point-in-time category ledger.
"""

import logging
from datetime import date

from habitlens.aggregation import completion_rate, dedupe_completions, in_window
from habitlens.config import ANALYTICS_DAYS, DEFAULT_CATEGORY
from habitlens.models import CategoryStats, Completion, Habit

log = logging.getLogger(__name__)

CATEGORY_COLORS = {
    "Health": "#10B981",
    "Fitness": "#F59E0B",
    "Learning": "#3B82F6",
    "Mindfulness": "#8B5CF6",
    "Productivity": "#EC4899",
    "General": "#7C9885",
}
FALLBACK_COLOR = "#7C9885"


def category_of(habit: Habit) -> str:
    return habit.category or DEFAULT_CATEGORY


def category_stats(
    habits: list[Habit],
    completions: list[Completion],
    today: date,
    days: int = ANALYTICS_DAYS,
) -> list[CategoryStats]:
    """One entry per category present in `habits`, in first-seen order."""
    habit_category = {h.id: category_of(h) for h in habits}

    habit_counts: dict[str, int] = {}
    for h in habits:
        cat = habit_category[h.id]
        habit_counts[cat] = habit_counts.get(cat, 0) + 1

    done: dict[str, int] = dict.fromkeys(habit_counts, 0)
    for c in in_window(dedupe_completions(completions), days, today):
        cat = habit_category.get(c.habit_id)
        if cat is not None:
            done[cat] += 1

    result = []
    for cat, count in habit_counts.items():
        total_possible = count * max(days, 0)
        result.append(CategoryStats(
            category=cat,
            color=CATEGORY_COLORS.get(cat, FALLBACK_COLOR),
            habit_count=count,
            completions=done[cat],
            total_possible=total_possible,
            rate=completion_rate(done[cat], total_possible),
        ))

    log.debug("Rolled up %d habits into %d categories", len(habits), len(result))
    return result
