"""
Session package: repetition phase tracking and the per-frame workout pipeline.
"""

from .rep_counter import PhaseUpdate, RepPhase, RepPhaseTracker, RepRecord
from .workout_session import (
    FrameResult,
    SessionAggregator,
    SessionResult,
    WorkoutSession,
    calories_burned,
    form_breakdown,
    summary_message,
)

__all__ = [
    'PhaseUpdate',
    'RepPhase',
    'RepPhaseTracker',
    'RepRecord',
    'FrameResult',
    'SessionAggregator',
    'SessionResult',
    'WorkoutSession',
    'calories_burned',
    'form_breakdown',
    'summary_message',
]
