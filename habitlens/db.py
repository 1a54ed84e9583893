"""SQLite store — habits, completions and cached streaks.

Single-user reference store for the analytics engine. Tables are created
automatically on first run. The streaks table is only a cache: every write
that touches completions recomputes the habit's streak from its full
completion history (see refresh_streak).
"""

import json
import sqlite3
import logging
from datetime import date, datetime, timezone, timedelta

from habitlens.config import DB_PATH, DEFAULT_CATEGORY, TIMEZONE_OFFSET_HOURS
from habitlens.models import ALL_WEEKDAYS
from habitlens.streaks import calculate_streak

logger = logging.getLogger(__name__)

TZ = timezone(timedelta(hours=TIMEZONE_OFFSET_HOURS))

_HABIT_FIELDS = ("name", "category", "frequency", "target_days")


def _connect() -> sqlite3.Connection:
    """Return a connection with row_factory set."""
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(DB_PATH))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def _today() -> date:
    return datetime.now(TZ).date()


def init_db() -> None:
    """Create tables if they don't exist."""
    conn = _connect()
    conn.executescript("""
        -- Habits (soft-deleted via active = 0)
        CREATE TABLE IF NOT EXISTS habits (
            id          INTEGER PRIMARY KEY AUTOINCREMENT,
            name        TEXT    NOT NULL,
            category    TEXT    NOT NULL DEFAULT 'General',
            frequency   TEXT    NOT NULL DEFAULT 'daily',
            target_days TEXT    NOT NULL DEFAULT '[0, 1, 2, 3, 4, 5, 6]',
            active      INTEGER NOT NULL DEFAULT 1,
            created_at  TEXT    NOT NULL
        );

        -- One completion per habit per calendar day
        CREATE TABLE IF NOT EXISTS completions (
            id             INTEGER PRIMARY KEY AUTOINCREMENT,
            habit_id       INTEGER NOT NULL REFERENCES habits(id),
            completed_date TEXT    NOT NULL,
            notes          TEXT,
            created_at     TEXT    NOT NULL
        );
        CREATE UNIQUE INDEX IF NOT EXISTS idx_completions_habit_date
            ON completions(habit_id, completed_date);

        -- Streak cache, recomputable from completions
        CREATE TABLE IF NOT EXISTS streaks (
            habit_id            INTEGER PRIMARY KEY REFERENCES habits(id),
            current_streak      INTEGER NOT NULL DEFAULT 0,
            longest_streak      INTEGER NOT NULL DEFAULT 0,
            last_completed_date TEXT,
            updated_at          TEXT    NOT NULL
        );
    """)
    conn.close()
    logger.info("Database initialized at %s", DB_PATH)


# ═══════════════════════════════════════════════════════════════════════════
# Habits
# ═══════════════════════════════════════════════════════════════════════════

def create_habit(name: str, category: str = DEFAULT_CATEGORY, frequency: str = "daily",
                 target_days: list[int] | None = None) -> int:
    """Create a new habit. Returns habit id."""
    now = datetime.now(TZ).isoformat()
    conn = _connect()
    cur = conn.execute(
        "INSERT INTO habits (name, category, frequency, target_days, created_at) "
        "VALUES (?, ?, ?, ?, ?)",
        (name, category or DEFAULT_CATEGORY, frequency,
         json.dumps(target_days if target_days is not None else ALL_WEEKDAYS), now),
    )
    conn.commit()
    hid = cur.lastrowid
    conn.close()
    return hid


def update_habit(habit_id: int, **updates) -> bool:
    """Update name/category/frequency/target_days. Returns False if not found."""
    fields = {k: v for k, v in updates.items() if k in _HABIT_FIELDS and v is not None}
    unknown = set(updates) - set(_HABIT_FIELDS)
    if unknown:
        raise ValueError(f"Unknown habit fields: {sorted(unknown)}")
    if "target_days" in fields:
        fields["target_days"] = json.dumps(fields["target_days"])
    if not fields:
        return get_habit(habit_id) is not None

    assignments = ", ".join(f"{k} = ?" for k in fields)
    conn = _connect()
    cur = conn.execute(
        f"UPDATE habits SET {assignments} WHERE id = ?",
        (*fields.values(), habit_id),
    )
    conn.commit()
    changed = cur.rowcount
    conn.close()
    return changed > 0


def archive_habit(habit_id: int) -> bool:
    """Soft delete: the habit drops out of get_habits() but keeps its history."""
    conn = _connect()
    cur = conn.execute("UPDATE habits SET active = 0 WHERE id = ?", (habit_id,))
    conn.commit()
    changed = cur.rowcount
    conn.close()
    return changed > 0


def get_habit(habit_id: int) -> dict | None:
    conn = _connect()
    row = conn.execute("SELECT * FROM habits WHERE id = ?", (habit_id,)).fetchone()
    conn.close()
    return dict(row) if row else None


def get_habits(include_inactive: bool = False) -> list[dict]:
    """Habits in creation order. target_days is returned as stored JSON text."""
    conn = _connect()
    sql = "SELECT id, name, category, frequency, target_days, active, created_at FROM habits"
    if not include_inactive:
        sql += " WHERE active = 1"
    sql += " ORDER BY created_at, id"
    rows = conn.execute(sql).fetchall()
    conn.close()
    return [dict(r) for r in rows]


# ═══════════════════════════════════════════════════════════════════════════
# Completions
# ═══════════════════════════════════════════════════════════════════════════

def complete_habit(habit_id: int, completed_date: date | None = None,
                   notes: str | None = None) -> bool:
    """Mark a habit done for a day (default today).

    Returns True if a new completion was stored, False if the habit doesn't
    exist or was already completed that day.
    """
    d = completed_date or _today()
    conn = _connect()
    if not conn.execute("SELECT 1 FROM habits WHERE id = ?", (habit_id,)).fetchone():
        conn.close()
        return False
    cur = conn.execute(
        "INSERT OR IGNORE INTO completions (habit_id, completed_date, notes, created_at) "
        "VALUES (?, ?, ?, ?)",
        (habit_id, d.isoformat(), notes, datetime.now(TZ).isoformat()),
    )
    conn.commit()
    changed = cur.rowcount
    conn.close()
    if changed == 0:
        return False
    refresh_streak(habit_id)
    return True


def uncomplete_habit(habit_id: int, completed_date: date | None = None) -> bool:
    """Remove the completion for a day (default today). Returns True if one existed."""
    d = completed_date or _today()
    conn = _connect()
    cur = conn.execute(
        "DELETE FROM completions WHERE habit_id = ? AND completed_date = ?",
        (habit_id, d.isoformat()),
    )
    conn.commit()
    changed = cur.rowcount
    conn.close()
    if changed == 0:
        return False
    refresh_streak(habit_id)
    return True


def get_completions(start: date | None = None, end: date | None = None,
                    habit_id: int | None = None) -> list[dict]:
    """Completions with start <= completed_date <= end, oldest first."""
    conn = _connect()
    sql = "SELECT id, habit_id, completed_date, notes FROM completions WHERE 1 = 1"
    params: list = []
    if start is not None:
        sql += " AND completed_date >= ?"
        params.append(start.isoformat())
    if end is not None:
        sql += " AND completed_date <= ?"
        params.append(end.isoformat())
    if habit_id is not None:
        sql += " AND habit_id = ?"
        params.append(habit_id)
    sql += " ORDER BY completed_date, id"
    rows = conn.execute(sql, params).fetchall()
    conn.close()
    return [dict(r) for r in rows]


# ═══════════════════════════════════════════════════════════════════════════
# Streaks
# ═══════════════════════════════════════════════════════════════════════════

def get_streaks() -> list[dict]:
    conn = _connect()
    rows = conn.execute(
        "SELECT habit_id, current_streak, longest_streak, last_completed_date FROM streaks"
    ).fetchall()
    conn.close()
    return [dict(r) for r in rows]


def refresh_streak(habit_id: int, today: date | None = None) -> dict:
    """Recompute a habit's streak from all its completions and upsert the cache.

    The stored longest_streak is kept as a floor, so deleting old
    completions never lowers a record.
    """
    conn = _connect()
    rows = conn.execute(
        "SELECT DISTINCT completed_date FROM completions WHERE habit_id = ?",
        (habit_id,),
    ).fetchall()
    stored = conn.execute(
        "SELECT longest_streak FROM streaks WHERE habit_id = ?", (habit_id,)
    ).fetchone()

    streak = calculate_streak(
        str(habit_id),
        [date.fromisoformat(r["completed_date"]) for r in rows],
        today=today or _today(),
        previous_longest=stored["longest_streak"] if stored else 0,
    )
    last = streak.last_completed_date.isoformat() if streak.last_completed_date else None
    conn.execute(
        """INSERT INTO streaks
               (habit_id, current_streak, longest_streak, last_completed_date, updated_at)
           VALUES (?, ?, ?, ?, ?)
           ON CONFLICT(habit_id) DO UPDATE SET
               current_streak = excluded.current_streak,
               longest_streak = excluded.longest_streak,
               last_completed_date = excluded.last_completed_date,
               updated_at = excluded.updated_at""",
        (habit_id, streak.current_streak, streak.longest_streak, last,
         datetime.now(TZ).isoformat()),
    )
    conn.commit()
    conn.close()

    logger.info(
        "Streak refreshed for habit #%d: current=%d longest=%d",
        habit_id, streak.current_streak, streak.longest_streak,
    )
    return {
        "habit_id": habit_id,
        "current_streak": streak.current_streak,
        "longest_streak": streak.longest_streak,
        "last_completed_date": last,
    }
