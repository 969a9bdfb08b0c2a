from typing import Dict, List

from .base_analyzer import (
    AngleMeasurement,
    BaseFormEvaluator,
    FeedbackType,
    FormAnalysisResult,
    register_form_evaluator,
)
from .pose_utils import Keypoint, angle_at

ELBOW_RANGE = (80, 100)
BODY_RANGE = (165, 180)


@register_form_evaluator("push-up", "pushup")
class PushUpEvaluator(BaseFormEvaluator):
    """Push-up at the bottom position: elbow bend and a straight body line."""

    def get_exercise_name(self) -> str:
        return "push-up"

    def get_required_keypoints(self) -> List[str]:
        return ["left_shoulder", "left_elbow", "left_wrist", "left_hip", "left_knee"]

    def get_critical_keypoints(self) -> List[str]:
        return ["left_shoulder", "left_elbow", "left_wrist", "left_hip"]

    def analyze_points(self, points: Dict[str, Keypoint]) -> FormAnalysisResult:
        shoulder = points["left_shoulder"]
        hip = points["left_hip"]

        elbow_angle = angle_at(shoulder, points["left_elbow"], points["left_wrist"])
        body_angle = angle_at(shoulder, hip, points["left_knee"])

        angles = [
            AngleMeasurement.within("Elbow Angle", elbow_angle, *ELBOW_RANGE),
            AngleMeasurement.within("Body Straight", body_angle, *BODY_RANGE),
        ]

        # Sagging hips outrank depth
        if body_angle < BODY_RANGE[0]:
            feedback, feedback_type = "Don't let hips sag!", FeedbackType.ERROR
        elif elbow_angle > ELBOW_RANGE[1]:
            feedback, feedback_type = "Lower your chest more", FeedbackType.WARNING
        else:
            feedback, feedback_type = "Perfect push-up!", FeedbackType.GOOD

        return self.build_result(angles, feedback, feedback_type)
