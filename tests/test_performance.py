"""Tests for the habit performance ranker."""

from datetime import date, timedelta

from habitlens.models import Completion, Habit, Streak
from habitlens.performance import habit_performance

TODAY = date(2024, 1, 30)


def _done(habit_id: str, count: int) -> list[Completion]:
    return [
        Completion(habit_id=habit_id, completed_date=TODAY - timedelta(days=n))
        for n in range(count)
    ]


class TestHabitPerformance:
    def test_ranked_best_first(self):
        a = Habit(id="a", name="Meditate")
        b = Habit(id="b", name="Exercise")
        ranked = habit_performance([b, a], _done("a", 27) + _done("b", 6), {}, TODAY, days=30)
        assert [p.habit.name for p in ranked] == ["Meditate", "Exercise"]
        assert [p.rate for p in ranked] == [90, 20]
        assert all(p.total_possible == 30 for p in ranked)

    def test_ties_keep_input_order(self):
        habits = [Habit(id=str(i), name=f"h{i}") for i in range(4)]
        completions = _done("0", 3) + _done("1", 3) + _done("2", 9) + _done("3", 3)
        ranked = habit_performance(habits, completions, {}, TODAY, days=30)
        assert [p.habit.id for p in ranked] == ["2", "0", "1", "3"]

    def test_merges_streaks(self):
        habits = [Habit(id="a", name="Read"), Habit(id="b", name="Run")]
        streaks = {"a": Streak(habit_id="a", current_streak=4, longest_streak=12)}
        ranked = habit_performance(habits, _done("a", 4), streaks, TODAY, days=30)
        by_id = {p.habit.id: p for p in ranked}
        assert (by_id["a"].current_streak, by_id["a"].longest_streak) == (4, 12)
        assert (by_id["b"].current_streak, by_id["b"].longest_streak) == (0, 0)

    def test_only_horizon_counts(self):
        ranked = habit_performance([Habit(id="a", name="Read")], _done("a", 60), {}, TODAY, days=30)
        assert ranked[0].completions == 30
        assert ranked[0].rate == 100

    def test_duplicates_count_once(self):
        ranked = habit_performance([Habit(id="a", name="Read")],
                                   _done("a", 3) + _done("a", 3), {}, TODAY, days=30)
        assert ranked[0].completions == 3

    def test_empty(self):
        assert habit_performance([], _done("a", 3), {}, TODAY, days=30) == []
