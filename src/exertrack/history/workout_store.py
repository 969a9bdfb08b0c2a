"""
Workout history persistence.

A finished session is handed over as a ``WorkoutSummary``; the session does
not know where it ends up. ``SQLiteWorkoutStore`` keeps summaries in a local
SQLite file and ``WorkoutHistory`` derives the history statistics.
"""
import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Union

from ..exercise_analysis.pose_utils import round_half_up

logger = logging.getLogger(__name__)

RECENT_SESSION_COUNT = 5


class WorkoutStoreError(Exception):
    """Raised when the workout store cannot read or write."""


@dataclass(frozen=True)
class FormBreakdown:
    correct_reps: int
    incorrect_reps: int


@dataclass(frozen=True)
class WorkoutSummary:
    """Record of one finished workout session."""
    session_id: str
    exercise_id: str
    exercise_name: str
    date: str  # ISO-8601, when the session finished
    duration: int  # seconds
    reps_completed: int
    average_accuracy: int
    calories_burned: int
    form_breakdown: FormBreakdown

    @property
    def finished_at(self) -> datetime:
        return _as_utc(datetime.fromisoformat(self.date))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.session_id,
            "exerciseId": self.exercise_id,
            "exerciseName": self.exercise_name,
            "date": self.date,
            "duration": self.duration,
            "repsCompleted": self.reps_completed,
            "averageAccuracy": self.average_accuracy,
            "caloriesBurned": self.calories_burned,
            "formBreakdown": {
                "correctReps": self.form_breakdown.correct_reps,
                "incorrectReps": self.form_breakdown.incorrect_reps,
            },
        }


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes are taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class WorkoutStore(ABC):
    """
    Persistence contract for finished workout sessions.

    Implementations report every storage failure as ``WorkoutStoreError``;
    a session only recovers from that type when it saves its summary.
    """

    @abstractmethod
    def add_session(self, user_id: str, summary: WorkoutSummary) -> None:
        pass

    @abstractmethod
    def get_sessions(self, user_id: str) -> List[WorkoutSummary]:
        """All sessions of a user, newest first."""
        pass

    @abstractmethod
    def delete_session(self, session_id: str) -> None:
        pass

    @abstractmethod
    def clear_sessions(self, user_id: str) -> None:
        pass

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


SCHEMA = r"""
PRAGMA journal_mode=WAL;

CREATE TABLE IF NOT EXISTS workouts (
  id TEXT PRIMARY KEY,
  user_id TEXT NOT NULL,
  exercise_id TEXT NOT NULL,
  exercise_name TEXT NOT NULL,
  date TEXT NOT NULL,
  duration INTEGER NOT NULL,
  reps_completed INTEGER NOT NULL,
  average_accuracy INTEGER NOT NULL,
  calories_burned INTEGER NOT NULL,
  form_breakdown TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_workouts_user ON workouts (user_id, date);
"""


class SQLiteWorkoutStore(WorkoutStore):
    """Workout store backed by a local SQLite database."""

    def __init__(self, db_path: Union[str, Path] = "exertrack.db"):
        self.db_path = str(db_path)
        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.executescript(SCHEMA)
            self._conn.commit()
        except (sqlite3.Error, OSError) as e:
            raise WorkoutStoreError(f"Could not open workout database {self.db_path}: {e}") from e
        logger.debug("Workout database ready at %s", self.db_path)

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            cursor = self._conn.execute(sql, params)
            self._conn.commit()
            return cursor
        except sqlite3.Error as e:
            raise WorkoutStoreError(f"Workout database error: {e}") from e

    def add_session(self, user_id: str, summary: WorkoutSummary) -> None:
        self._execute(
            """
            INSERT INTO workouts (
              id, user_id, exercise_id, exercise_name, date, duration,
              reps_completed, average_accuracy, calories_burned, form_breakdown
            ) VALUES (?,?,?,?,?,?,?,?,?,?)
            """,
            (
                summary.session_id,
                user_id,
                summary.exercise_id,
                summary.exercise_name,
                summary.date,
                summary.duration,
                summary.reps_completed,
                summary.average_accuracy,
                summary.calories_burned,
                json.dumps({
                    "correctReps": summary.form_breakdown.correct_reps,
                    "incorrectReps": summary.form_breakdown.incorrect_reps,
                }),
            ),
        )
        logger.info("Saved workout %s (%s) for user %s", summary.session_id, summary.exercise_id, user_id)

    def get_sessions(self, user_id: str) -> List[WorkoutSummary]:
        cursor = self._execute(
            """
            SELECT id, exercise_id, exercise_name, date, duration, reps_completed,
                   average_accuracy, calories_burned, form_breakdown
            FROM workouts WHERE user_id = ? ORDER BY date DESC, rowid DESC
            """,
            (user_id,),
        )
        sessions = []
        for row in cursor.fetchall():
            breakdown = json.loads(row[8])
            sessions.append(WorkoutSummary(
                session_id=row[0],
                exercise_id=row[1],
                exercise_name=row[2],
                date=row[3],
                duration=row[4],
                reps_completed=row[5],
                average_accuracy=row[6],
                calories_burned=row[7],
                form_breakdown=FormBreakdown(
                    correct_reps=breakdown.get("correctReps", 0),
                    incorrect_reps=breakdown.get("incorrectReps", 0),
                ),
            ))
        return sessions

    def delete_session(self, session_id: str) -> None:
        self._execute("DELETE FROM workouts WHERE id = ?", (session_id,))

    def clear_sessions(self, user_id: str) -> None:
        self._execute("DELETE FROM workouts WHERE user_id = ?", (user_id,))

    def close(self) -> None:
        self._conn.close()


class WorkoutHistory:
    """
    A user's workout history with the derived statistics.

    Sessions are loaded once and kept in sync on add/delete/clear; call
    ``refresh`` to reload after outside writes.
    """

    def __init__(self, store: WorkoutStore, user_id: str):
        self.store = store
        self.user_id = user_id
        self._sessions: List[WorkoutSummary] = []
        self.refresh()

    def refresh(self) -> None:
        self._sessions = self.store.get_sessions(self.user_id)

    @property
    def sessions(self) -> List[WorkoutSummary]:
        return list(self._sessions)

    def add_session(self, summary: WorkoutSummary) -> None:
        self.store.add_session(self.user_id, summary)
        self._sessions.insert(0, summary)

    def delete_session(self, session_id: str) -> None:
        self.store.delete_session(session_id)
        self._sessions = [s for s in self._sessions if s.session_id != session_id]

    def clear(self) -> None:
        self.store.clear_sessions(self.user_id)
        self._sessions = []

    @property
    def recent_sessions(self) -> List[WorkoutSummary]:
        return self._sessions[:RECENT_SESSION_COUNT]

    @property
    def total_workouts(self) -> int:
        return len(self._sessions)

    @property
    def average_accuracy(self) -> int:
        if not self._sessions:
            return 0
        return round_half_up(sum(s.average_accuracy for s in self._sessions) / len(self._sessions))

    @property
    def total_calories_burned(self) -> int:
        return sum(s.calories_burned for s in self._sessions)

    def sessions_by_exercise(self, exercise_id: str) -> List[WorkoutSummary]:
        return [s for s in self._sessions if s.exercise_id == exercise_id]

    def sessions_by_date_range(self, start: datetime, end: datetime) -> List[WorkoutSummary]:
        """Sessions whose date falls within [start, end]."""
        start, end = _as_utc(start), _as_utc(end)
        return [s for s in self._sessions if start <= s.finished_at <= end]
