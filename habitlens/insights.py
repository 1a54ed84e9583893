"""Insight synthesizer — rule-based insights over the aggregates.

Each rule is a small pure function returning an Insight or None.
generate_insights() evaluates all of them in a fixed order and keeps every
one that fires:

  1. Habit Champion       achievement  average daily rate is high
  2. Week Warrior         achievement  best current streak >= a week
  3. Monthly Master       achievement  best longest streak >= a month
  4. Top Performer        success      top-ranked habit rate is high
  5. Needs Attention      warning      bottom-ranked habit rate is low
  6. Weekend Dip /
     Weekday Challenge    tip          weekend vs weekday daily rates differ
  7. Category Imbalance   tip          best vs worst category differ
  8. Upward /
     Downward Trend       success/warning  last two weekly buckets differ

No ML, no LLM. Thresholds come from config and can be overridden per call.
"""

import logging

from habitlens.config import (
    CATEGORY_GAP_POINTS,
    CHAMPION_RATE,
    MONTHLY_MASTER_DAYS,
    NEEDS_ATTENTION_RATE,
    TOP_PERFORMER_RATE,
    TREND_POINTS,
    WEEK_WARRIOR_DAYS,
    WEEKEND_SKEW_POINTS,
)
from habitlens.models import (
    CategoryStats,
    DailyStats,
    HabitPerformance,
    Insight,
    WeeklyStats,
)

log = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Achievements
# ═══════════════════════════════════════════════════════════════════════════

def habit_champion(average_rate: int, threshold: int = CHAMPION_RATE) -> Insight | None:
    if average_rate < threshold:
        return None
    return Insight(
        type="achievement",
        title="Habit Champion!",
        description=(
            f"You're maintaining an impressive {average_rate}% completion rate. "
            "Keep up the excellent work!"
        ),
        icon="trophy",
    )


def week_warrior(current_streak: int, threshold: int = WEEK_WARRIOR_DAYS) -> Insight | None:
    if current_streak < threshold:
        return None
    return Insight(
        type="achievement",
        title="Week Warrior",
        description=(
            f"You've maintained a {current_streak}-day streak! "
            "Consistency is key to lasting change."
        ),
        icon="flame",
    )


def monthly_master(longest_streak: int, threshold: int = MONTHLY_MASTER_DAYS) -> Insight | None:
    if longest_streak < threshold:
        return None
    return Insight(
        type="achievement",
        title="Monthly Master",
        description=f"Your longest streak of {longest_streak} days shows incredible dedication!",
        icon="crown",
    )


# ═══════════════════════════════════════════════════════════════════════════
# Per-habit
# ═══════════════════════════════════════════════════════════════════════════

def top_performer(
    performance: list[HabitPerformance], threshold: int = TOP_PERFORMER_RATE
) -> Insight | None:
    """performance must already be ranked best first."""
    if not performance or performance[0].rate < threshold:
        return None
    best = performance[0]
    return Insight(
        type="success",
        title="Top Performer",
        description=f'"{best.habit.name}" is your best habit with {best.rate}% completion rate.',
        icon="star",
    )


def needs_attention(
    performance: list[HabitPerformance], threshold: int = NEEDS_ATTENTION_RATE
) -> Insight | None:
    if not performance or performance[-1].rate >= threshold:
        return None
    worst = performance[-1]
    return Insight(
        type="warning",
        title="Needs Attention",
        description=(
            f'"{worst.habit.name}" has only {worst.rate}% completion. '
            "Consider adjusting its schedule."
        ),
        icon="alert-triangle",
    )


# ═══════════════════════════════════════════════════════════════════════════
# Patterns
# ═══════════════════════════════════════════════════════════════════════════

def weekend_weekday_means(daily: list[DailyStats]) -> tuple[float | None, float | None]:
    """Mean daily rate for (weekend, weekday) buckets; None when a side is empty."""
    weekend = [d.rate for d in daily if d.date.weekday() >= 5]
    weekday = [d.rate for d in daily if d.date.weekday() < 5]
    return (
        sum(weekend) / len(weekend) if weekend else None,
        sum(weekday) / len(weekday) if weekday else None,
    )


def weekend_skew(daily: list[DailyStats], gap: int = WEEKEND_SKEW_POINTS) -> Insight | None:
    weekend_avg, weekday_avg = weekend_weekday_means(daily)
    if weekend_avg is None or weekday_avg is None:
        return None

    if weekend_avg < weekday_avg - gap:
        return Insight(
            type="tip",
            title="Weekend Dip",
            description="Your completion rate drops on weekends. Try setting specific weekend routines.",
            icon="lightbulb",
        )
    if weekday_avg < weekend_avg - gap:
        return Insight(
            type="tip",
            title="Weekday Challenge",
            description="Weekdays seem challenging. Consider simplifying habits for busy days.",
            icon="lightbulb",
        )
    return None


def category_imbalance(
    categories: list[CategoryStats], gap: int = CATEGORY_GAP_POINTS
) -> Insight | None:
    if len(categories) < 2:
        return None
    # max()/min() return the first of equal candidates
    best = max(categories, key=lambda c: c.rate)
    worst = min(categories, key=lambda c: c.rate)
    if best.rate <= worst.rate + gap:
        return None
    return Insight(
        type="tip",
        title="Category Imbalance",
        description=(
            f"You excel at {best.category} ({best.rate}%) but "
            f"{worst.category} ({worst.rate}%) needs more focus."
        ),
        icon="bar-chart",
    )


def weekly_trend(weekly: list[WeeklyStats], gap: int = TREND_POINTS) -> Insight | None:
    if len(weekly) < 2:
        return None
    last, prev = weekly[-1].rate, weekly[-2].rate

    if last > prev + gap:
        return Insight(
            type="success",
            title="Upward Trend",
            description=f"Great progress! Your completion rate improved by {last - prev}% this week.",
            icon="trending-up",
        )
    if last < prev - gap:
        return Insight(
            type="warning",
            title="Downward Trend",
            description=f"Your completion rate dropped by {prev - last}% this week. Time to refocus!",
            icon="trending-down",
        )
    return None


# ═══════════════════════════════════════════════════════════════════════════
# Orchestration
# ═══════════════════════════════════════════════════════════════════════════

def generate_insights(
    average_rate: int,
    current_overall_streak: int,
    longest_overall_streak: int,
    performance: list[HabitPerformance],
    daily: list[DailyStats],
    categories: list[CategoryStats],
    weekly: list[WeeklyStats],
) -> list[Insight]:
    """Evaluate every rule in priority order; achievements come first."""
    candidates = [
        habit_champion(average_rate),
        week_warrior(current_overall_streak),
        monthly_master(longest_overall_streak),
        top_performer(performance),
        needs_attention(performance),
        weekend_skew(daily),
        category_imbalance(categories),
        weekly_trend(weekly),
    ]
    insights = [i for i in candidates if i is not None]
    log.debug("Insights fired: %s", [i.title for i in insights])
    return insights
