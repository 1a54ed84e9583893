"""Streak calculator — current and longest streaks from completion dates.

Pure functions, no I/O. The current streak is recomputed exactly from the
data on every call; the longest streak is a sticky high that only grows:
callers pass the previously stored value and the result is the max of that
and the freshly computed one.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Iterable

from habitlens.config import TIMEZONE_OFFSET_HOURS
from habitlens.models import Completion, Habit, Streak

log = logging.getLogger(__name__)

TZ = timezone(timedelta(hours=TIMEZONE_OFFSET_HOURS))
ONE_DAY = timedelta(days=1)


def local_today() -> date:
    return datetime.now(TZ).date()


def current_streak(dates: Iterable[date], today: date) -> int:
    """Count consecutive days logged, ending on today or yesterday."""
    logged = set(dates)
    check = today
    # A miss today doesn't break the streak yet
    if check not in logged:
        check = today - ONE_DAY
    streak = 0
    while check in logged:
        streak += 1
        check -= ONE_DAY
    return streak


def longest_streak(dates: Iterable[date]) -> int:
    """Longest run of consecutive days anywhere in the history."""
    ordered = sorted(set(dates))
    if not ordered:
        return 0

    best = run = 1
    for prev, curr in zip(ordered, ordered[1:]):
        if curr - prev == ONE_DAY:
            run += 1
            best = max(best, run)
        else:
            run = 1
    return best


def calculate_streak(
    habit_id: str,
    dates: Iterable[date],
    today: date | None = None,
    previous_longest: int = 0,
) -> Streak:
    """Build the Streak record for one habit.

    Args:
        habit_id: Habit the dates belong to
        dates: Completion dates (duplicates and any order are fine)
        today: Reference day, defaults to today in the configured timezone
        previous_longest: Longest streak already on record; never lowered

    Example:
        >>> s = calculate_streak("h1", [date(2024, 1, 1), date(2024, 1, 2)],
        ...                      today=date(2024, 1, 2))
        >>> (s.current_streak, s.longest_streak)
        (2, 2)
    """
    if today is None:
        today = local_today()

    unique = set(dates)
    if not unique:
        return Streak(habit_id=habit_id, longest_streak=max(0, previous_longest))

    current = current_streak(unique, today)
    longest = max(longest_streak(unique), previous_longest, current)
    return Streak(
        habit_id=habit_id,
        current_streak=current,
        longest_streak=longest,
        last_completed_date=max(unique),
    )


def calculate_streaks(
    habits: list[Habit],
    completions: list[Completion],
    previous: dict[str, Streak] | None = None,
    today: date | None = None,
) -> dict[str, Streak]:
    """Recompute the streak map for every habit in the snapshot.

    previous holds cached streak records (e.g. from the store); only their
    longest_streak is used, as the sticky floor.
    """
    if today is None:
        today = local_today()
    previous = previous or {}

    dates_by_habit: dict[str, set[date]] = {h.id: set() for h in habits}
    for c in completions:
        if c.habit_id in dates_by_habit:
            dates_by_habit[c.habit_id].add(c.completed_date)

    result = {}
    for habit_id, dates in dates_by_habit.items():
        stored = previous.get(habit_id)
        result[habit_id] = calculate_streak(
            habit_id,
            dates,
            today=today,
            previous_longest=stored.longest_streak if stored else 0,
        )

    log.debug("Recomputed streaks for %d habits", len(result))
    return result
