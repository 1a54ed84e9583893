"""Data model — input snapshots and the value types the engine emits.

Inputs (Habit, Completion, Streak) are read-only snapshots handed over by the
store or any other ingestion layer. Everything else is recomputed on each
call and carries no identity.
"""

import json
from dataclasses import dataclass, field
from datetime import date

from habitlens.config import DEFAULT_CATEGORY

ALL_WEEKDAYS = [0, 1, 2, 3, 4, 5, 6]


def to_date(value) -> date | None:
    """Coerce a store value (ISO string, datetime string or date) to a date."""
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value if type(value) is date else value.date()
    # "2024-01-05" or "2024-01-05T08:30:00+00:00"
    return date.fromisoformat(str(value)[:10])


# ═══════════════════════════════════════════════════════════════════════════
# Inputs
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class Habit:
    id: str
    name: str
    category: str = DEFAULT_CATEGORY
    frequency: str = "daily"
    target_days: list[int] = field(default_factory=lambda: list(ALL_WEEKDAYS))
    created_at: str = ""

    @classmethod
    def from_row(cls, row: dict) -> "Habit":
        target_days = row.get("target_days")
        if isinstance(target_days, str):
            target_days = json.loads(target_days)
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            category=row.get("category") or DEFAULT_CATEGORY,
            frequency=row.get("frequency") or "daily",
            target_days=list(target_days) if target_days else list(ALL_WEEKDAYS),
            created_at=row.get("created_at") or "",
        )


@dataclass
class Completion:
    habit_id: str
    completed_date: date
    id: str = ""
    notes: str | None = None  # carried, never read by the engine

    @classmethod
    def from_row(cls, row: dict) -> "Completion":
        return cls(
            id=str(row.get("id", "")),
            habit_id=str(row["habit_id"]),
            completed_date=to_date(row["completed_date"]),
            notes=row.get("notes"),
        )


@dataclass
class Streak:
    """Per-habit streak record.

    longest_streak >= current_streak always holds. last_completed_date is
    None until the habit has at least one completion.
    """
    habit_id: str
    current_streak: int = 0
    longest_streak: int = 0
    last_completed_date: date | None = None

    @classmethod
    def from_row(cls, row: dict) -> "Streak":
        return cls(
            habit_id=str(row["habit_id"]),
            current_streak=int(row.get("current_streak") or 0),
            longest_streak=int(row.get("longest_streak") or 0),
            last_completed_date=to_date(row.get("last_completed_date")),
        )


# ═══════════════════════════════════════════════════════════════════════════
# Aggregate buckets
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class DailyStats:
    date: date
    completions: int
    total: int
    rate: int


@dataclass
class WeeklyStats:
    week: str               # "Week 1" is the oldest bucket
    start_date: date
    end_date: date
    completions: int
    total: int
    rate: int


@dataclass
class MonthlyStats:
    month: str              # "Jan", "Feb", ...
    year: int
    completions: int
    total: int
    rate: int


@dataclass
class CategoryStats:
    category: str
    color: str
    habit_count: int
    completions: int
    total_possible: int
    rate: int


@dataclass
class HabitPerformance:
    habit: Habit
    completions: int
    total_possible: int
    rate: int
    current_streak: int = 0
    longest_streak: int = 0


@dataclass
class Insight:
    type: str               # "achievement" | "success" | "warning" | "tip"
    title: str
    description: str
    icon: str


# ═══════════════════════════════════════════════════════════════════════════
# Report
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class OverallStats:
    total_completions: int = 0
    average_rate: int = 0
    best_day: date | None = None
    best_day_rate: int = 0
    current_overall_streak: int = 0
    longest_overall_streak: int = 0
    most_consistent_habit: str | None = None
    least_consistent_habit: str | None = None


@dataclass
class AnalyticsReport:
    days: int
    today: date
    daily_stats: list[DailyStats] = field(default_factory=list)
    weekly_stats: list[WeeklyStats] = field(default_factory=list)
    monthly_stats: list[MonthlyStats] = field(default_factory=list)
    category_stats: list[CategoryStats] = field(default_factory=list)
    habit_performance: list[HabitPerformance] = field(default_factory=list)
    streaks: dict[str, Streak] = field(default_factory=dict)
    insights: list[Insight] = field(default_factory=list)
    overall: OverallStats = field(default_factory=OverallStats)
