from typing import Dict, List

from .base_analyzer import (
    AngleMeasurement,
    BaseFormEvaluator,
    FeedbackType,
    FormAnalysisResult,
    register_form_evaluator,
)
from .config_utils import DEFAULT_ALIGNMENT_TOLERANCE, TrainerConfig
from .pose_utils import DEFAULT_CONFIDENCE_THRESHOLD, Keypoint, angle_at

BODY_RANGE = (170, 180)


@register_form_evaluator("plank")
class PlankEvaluator(BaseFormEvaluator):
    """
    Forearm plank hold.

    Shoulder-over-elbow alignment is a positional check, not an angle; it is
    reported as 180 degrees when aligned and 90 otherwise so it fits the same
    measurement list as the body line.
    """

    def __init__(
        self,
        min_confidence: float = DEFAULT_CONFIDENCE_THRESHOLD,
        alignment_tolerance: float = DEFAULT_ALIGNMENT_TOLERANCE,
    ):
        super().__init__(min_confidence)
        self.alignment_tolerance = alignment_tolerance

    @classmethod
    def from_config(cls, config: TrainerConfig) -> "PlankEvaluator":
        return cls(min_confidence=config.min_confidence, alignment_tolerance=config.plank_alignment_tolerance)

    def get_exercise_name(self) -> str:
        return "plank"

    def get_required_keypoints(self) -> List[str]:
        return ["left_shoulder", "left_elbow", "left_hip", "left_ankle"]

    def analyze_points(self, points: Dict[str, Keypoint]) -> FormAnalysisResult:
        shoulder = points["left_shoulder"]
        elbow = points["left_elbow"]

        body_angle = angle_at(shoulder, points["left_hip"], points["left_ankle"])
        # NaN offsets compare False, so a missing joint counts as misaligned
        shoulder_over_elbow = abs(shoulder.x - elbow.x) < self.alignment_tolerance

        angles = [
            AngleMeasurement.within("Body Straight", body_angle, *BODY_RANGE),
            AngleMeasurement(
                name="Shoulders over elbows",
                angle=180.0 if shoulder_over_elbow else 90.0,
                is_correct=shoulder_over_elbow,
                min_angle=180,
                max_angle=180,
            ),
        ]

        if body_angle < BODY_RANGE[0]:
            feedback, feedback_type = "Don't let hips drop!", FeedbackType.ERROR
        elif not shoulder_over_elbow:
            feedback, feedback_type = "Keep shoulders over elbows", FeedbackType.WARNING
        else:
            feedback, feedback_type = "Strong plank!", FeedbackType.GOOD

        return self.build_result(angles, feedback, feedback_type)
