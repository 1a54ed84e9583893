"""HabitLens — streak and analytics engine for habit tracking."""

__version__ = "0.1.0"
