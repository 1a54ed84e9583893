"""Tests for row adapters on the data model."""

from datetime import date, datetime

from habitlens.models import Completion, Habit, Streak, to_date


class TestToDate:
    def test_values(self):
        assert to_date("2024-01-05") == date(2024, 1, 5)
        assert to_date("2024-01-05T23:10:00+00:00") == date(2024, 1, 5)
        assert to_date(datetime(2024, 1, 5, 8, 30)) == date(2024, 1, 5)
        assert to_date(date(2024, 1, 5)) == date(2024, 1, 5)
        assert to_date(None) is None
        assert to_date("") is None


class TestFromRow:
    def test_habit_defaults(self):
        habit = Habit.from_row({"id": 3, "name": "Walk", "category": None})
        assert habit.id == "3"
        assert habit.category == "General"
        assert habit.frequency == "daily"
        assert habit.target_days == [0, 1, 2, 3, 4, 5, 6]

    def test_habit_target_days_json(self):
        habit = Habit.from_row({"id": "x", "name": "Gym", "target_days": "[1, 3, 5]"})
        assert habit.target_days == [1, 3, 5]

    def test_completion(self):
        c = Completion.from_row({"id": 7, "habit_id": 3, "completed_date": "2024-02-29",
                                 "notes": "felt good"})
        assert c.habit_id == "3"
        assert c.completed_date == date(2024, 2, 29)
        assert c.notes == "felt good"

    def test_streak(self):
        s = Streak.from_row({"habit_id": 3, "current_streak": 2, "longest_streak": 9,
                             "last_completed_date": None})
        assert s == Streak(habit_id="3", current_streak=2, longest_streak=9)
