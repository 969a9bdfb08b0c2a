from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from .config_utils import TrainerConfig
from .pose_utils import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    Keypoint,
    any_low_confidence,
    find_keypoint,
    is_finite_angle,
    round_half_up,
)

LOW_CONFIDENCE_ACCURACY_CAP = 50
LOW_CONFIDENCE_MESSAGE = "Move into better view"


class FeedbackType(Enum):
    """Severity of the feedback shown for a frame."""
    GOOD = "good"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class AngleMeasurement:
    """One measured joint angle and whether it sits inside its tolerance band."""
    name: str
    angle: float  # degrees
    is_correct: bool
    min_angle: float
    max_angle: float

    @classmethod
    def within(cls, name: str, angle: float, min_angle: float, max_angle: float) -> "AngleMeasurement":
        # A NaN angle (missing joint) is never correct.
        correct = is_finite_angle(angle) and min_angle <= angle <= max_angle
        return cls(name=name, angle=angle, is_correct=correct, min_angle=min_angle, max_angle=max_angle)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "angle": self.angle,
            "isCorrect": self.is_correct,
            "minAngle": self.min_angle,
            "maxAngle": self.max_angle,
        }


@dataclass(frozen=True)
class FormAnalysisResult:
    """Per-frame output of a form evaluator."""
    angles: Tuple[AngleMeasurement, ...]
    accuracy: int  # 0-100
    feedback: str
    feedback_type: FeedbackType
    movement_phase: Optional[str] = None  # burpee sub-phase only

    @property
    def angle_map(self) -> Dict[str, float]:
        return {m.name: m.angle for m in self.angles}

    @property
    def correct_count(self) -> int:
        return sum(1 for m in self.angles if m.is_correct)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "angles": [m.to_dict() for m in self.angles],
            "accuracy": self.accuracy,
            "feedback": self.feedback,
            "feedbackType": self.feedback_type.value,
        }
        if self.movement_phase is not None:
            data["phase"] = self.movement_phase
        return data


def score_angles(angles: Sequence[AngleMeasurement]) -> int:
    """Percentage of satisfied angle criteria, 0 when nothing was measured."""
    if not angles:
        return 0
    correct = sum(1 for m in angles if m.is_correct)
    return round_half_up(100 * correct / len(angles))


def insufficient_view_result(message: str = LOW_CONFIDENCE_MESSAGE) -> FormAnalysisResult:
    """Result used for frames that cannot be analyzed at all."""
    return FormAnalysisResult(angles=(), accuracy=0, feedback=message, feedback_type=FeedbackType.WARNING)


# --- Evaluator Registry ---
FORM_EVALUATOR_REGISTRY: Dict[str, Type["BaseFormEvaluator"]] = {}


def register_form_evaluator(*exercise_ids: str):
    """Class decorator adding an evaluator to the registry under each given id."""
    def decorator(cls):
        for exercise_id in exercise_ids:
            FORM_EVALUATOR_REGISTRY[exercise_id.lower()] = cls
        return cls
    return decorator


class BaseFormEvaluator(ABC):
    """
    Base class for per-exercise form evaluators.

    Evaluators are stateless: ``evaluate`` depends only on the keypoints it is
    given, so the same frame always produces the same result. Noisy or missing
    keypoints lower the accuracy instead of raising.
    """

    def __init__(self, min_confidence: float = DEFAULT_CONFIDENCE_THRESHOLD):
        self.min_confidence = min_confidence

    @classmethod
    def from_config(cls, config: TrainerConfig) -> "BaseFormEvaluator":
        return cls(min_confidence=config.min_confidence)

    @abstractmethod
    def get_exercise_name(self) -> str:
        """Canonical exercise id handled by this evaluator."""
        pass

    @abstractmethod
    def get_required_keypoints(self) -> List[str]:
        """Names of the keypoints this evaluator reads."""
        pass

    def get_critical_keypoints(self) -> List[str]:
        """
        Keypoints whose low confidence invalidates the frame's accuracy.

        Defaults to every required keypoint.
        """
        return self.get_required_keypoints()

    @abstractmethod
    def analyze_points(self, points: Dict[str, Keypoint]) -> FormAnalysisResult:
        """
        Measure angles and pick feedback from the selected keypoints.

        Args:
            points: Required keypoints by name (placeholders for missing ones)

        Returns:
            FormAnalysisResult before the low-confidence cap is applied
        """
        pass

    def select_keypoints(self, keypoints: Sequence[Keypoint]) -> Dict[str, Keypoint]:
        return {name: find_keypoint(keypoints, name) for name in self.get_required_keypoints()}

    def has_low_confidence(self, points: Dict[str, Keypoint]) -> bool:
        critical = [points[name] for name in self.get_critical_keypoints() if name in points]
        return any_low_confidence(critical, self.min_confidence)

    def evaluate(self, keypoints: Sequence[Keypoint]) -> FormAnalysisResult:
        """
        Evaluate one frame of keypoints.

        Low confidence on any critical keypoint takes precedence over every
        form check: accuracy is capped and the feedback asks for a better view.
        """
        points = self.select_keypoints(keypoints)
        result = self.analyze_points(points)
        if self.has_low_confidence(points):
            return replace(
                result,
                accuracy=min(result.accuracy, LOW_CONFIDENCE_ACCURACY_CAP),
                feedback=LOW_CONFIDENCE_MESSAGE,
                feedback_type=FeedbackType.WARNING,
            )
        return result

    @staticmethod
    def build_result(
        angles: List[AngleMeasurement],
        feedback: str,
        feedback_type: FeedbackType,
        movement_phase: Optional[str] = None,
    ) -> FormAnalysisResult:
        return FormAnalysisResult(
            angles=tuple(angles),
            accuracy=score_angles(angles),
            feedback=feedback,
            feedback_type=feedback_type,
            movement_phase=movement_phase,
        )
