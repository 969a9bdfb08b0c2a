"""
Exercise analysis package: geometry, confidence filtering and per-exercise form evaluators.
"""

from .base_analyzer import (
    FORM_EVALUATOR_REGISTRY,
    AngleMeasurement,
    BaseFormEvaluator,
    FeedbackType,
    FormAnalysisResult,
)
from .burpee_analyzer import BurpeeEvaluator, BurpeePhase
from .config_utils import PhaseThresholds, TrainerConfig, load_trainer_config
from .form_dispatch import (
    DEFAULT_EXERCISE,
    get_form_evaluator,
    measure_exercise_form,
    normalize_exercise_id,
    supported_exercises,
)
from .lunge_analyzer import LungeEvaluator
from .plank_analyzer import PlankEvaluator
from .pose_utils import (
    Keypoint,
    angle_at,
    confident_keypoints,
    distance,
    find_keypoint,
    has_minimum_confidence,
)
from .pushup_analyzer import PushUpEvaluator
from .squat_analyzer import SquatEvaluator

__all__ = [
    'FORM_EVALUATOR_REGISTRY',
    'AngleMeasurement',
    'BaseFormEvaluator',
    'FeedbackType',
    'FormAnalysisResult',
    'BurpeeEvaluator',
    'BurpeePhase',
    'PhaseThresholds',
    'TrainerConfig',
    'load_trainer_config',
    'DEFAULT_EXERCISE',
    'get_form_evaluator',
    'measure_exercise_form',
    'normalize_exercise_id',
    'supported_exercises',
    'LungeEvaluator',
    'PlankEvaluator',
    'Keypoint',
    'angle_at',
    'confident_keypoints',
    'distance',
    'find_keypoint',
    'has_minimum_confidence',
    'PushUpEvaluator',
    'SquatEvaluator',
]
