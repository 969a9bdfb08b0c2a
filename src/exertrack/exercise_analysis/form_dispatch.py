"""
form_dispatch.py - Route an exercise id to its form evaluator.
"""
import logging
from typing import List, Optional, Sequence

from .base_analyzer import FORM_EVALUATOR_REGISTRY, BaseFormEvaluator, FormAnalysisResult
from .config_utils import TrainerConfig
from .pose_utils import Keypoint

# Importing the evaluator modules registers them.
from . import burpee_analyzer, lunge_analyzer, plank_analyzer, pushup_analyzer, squat_analyzer  # noqa: F401

logger = logging.getLogger(__name__)

# Unknown exercises are scored with this evaluator rather than failing the session.
DEFAULT_EXERCISE = "squat"


def normalize_exercise_id(exercise_id: Optional[str]) -> str:
    return (exercise_id or "").strip().lower()


def is_supported_exercise(exercise_id: str) -> bool:
    return normalize_exercise_id(exercise_id) in FORM_EVALUATOR_REGISTRY


def supported_exercises() -> List[str]:
    """Canonical ids of the exercises with a dedicated evaluator."""
    return sorted({cls().get_exercise_name() for cls in FORM_EVALUATOR_REGISTRY.values()})


def get_form_evaluator(exercise_id: str, config: Optional[TrainerConfig] = None) -> BaseFormEvaluator:
    """
    Build the evaluator for an exercise id.

    Args:
        exercise_id: Exercise id, case-insensitive ("push-up" and "pushup" are aliases)
        config: Trainer configuration; defaults are used when omitted

    Returns:
        Evaluator instance; the squat evaluator for unknown ids
    """
    evaluator_cls = FORM_EVALUATOR_REGISTRY.get(normalize_exercise_id(exercise_id))
    if evaluator_cls is None:
        logger.warning("Unknown exercise %r, falling back to %s evaluator", exercise_id, DEFAULT_EXERCISE)
        evaluator_cls = FORM_EVALUATOR_REGISTRY[DEFAULT_EXERCISE]
    return evaluator_cls.from_config(config or TrainerConfig())


def measure_exercise_form(exercise_id: str, keypoints: Sequence[Keypoint]) -> FormAnalysisResult:
    """Evaluate one frame of keypoints for the given exercise."""
    return get_form_evaluator(exercise_id).evaluate(keypoints)
