"""
Workout history: the persistence collaborator for finished sessions.
"""

from .workout_store import (
    FormBreakdown,
    SQLiteWorkoutStore,
    WorkoutHistory,
    WorkoutStore,
    WorkoutStoreError,
    WorkoutSummary,
)

__all__ = [
    "FormBreakdown",
    "SQLiteWorkoutStore",
    "WorkoutHistory",
    "WorkoutStore",
    "WorkoutStoreError",
    "WorkoutSummary",
]
