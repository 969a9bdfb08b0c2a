from typing import Dict, List

from .base_analyzer import (
    AngleMeasurement,
    BaseFormEvaluator,
    FeedbackType,
    FormAnalysisResult,
    register_form_evaluator,
)
from .pose_utils import Keypoint, angle_at, vertical_reference

FRONT_KNEE_RANGE = (85, 100)
TORSO_RANGE = (80, 180)


@register_form_evaluator("lunge")
class LungeEvaluator(BaseFormEvaluator):
    """Forward lunge: front knee near 90 degrees with an upright torso."""

    def get_exercise_name(self) -> str:
        return "lunge"

    def get_required_keypoints(self) -> List[str]:
        return ["left_hip", "left_knee", "left_ankle", "left_shoulder"]

    def analyze_points(self, points: Dict[str, Keypoint]) -> FormAnalysisResult:
        hip = points["left_hip"]

        knee_angle = angle_at(hip, points["left_knee"], points["left_ankle"])
        torso_angle = angle_at(vertical_reference(hip), hip, points["left_shoulder"])

        angles = [
            AngleMeasurement.within("Front Knee", knee_angle, *FRONT_KNEE_RANGE),
            AngleMeasurement.within("Torso Upright", torso_angle, *TORSO_RANGE),
        ]

        if knee_angle < FRONT_KNEE_RANGE[0]:
            feedback, feedback_type = "Front knee too far forward", FeedbackType.ERROR
        elif torso_angle < TORSO_RANGE[0]:
            feedback, feedback_type = "Stay upright", FeedbackType.WARNING
        elif knee_angle > FRONT_KNEE_RANGE[1]:
            feedback, feedback_type = "Lower your back knee", FeedbackType.WARNING
        else:
            feedback, feedback_type = "Perfect lunge!", FeedbackType.GOOD

        return self.build_result(angles, feedback, feedback_type)
