from typing import Dict, List

from .base_analyzer import (
    AngleMeasurement,
    BaseFormEvaluator,
    FeedbackType,
    FormAnalysisResult,
    register_form_evaluator,
)
from .pose_utils import Keypoint, angle_at, vertical_reference

# Tolerance bands (degrees) for the bottom of a squat
KNEE_RANGE = (80, 110)
HIP_RANGE = (80, 100)
BACK_RANGE = (160, 180)


@register_form_evaluator("squat")
class SquatEvaluator(BaseFormEvaluator):
    """Side-view squat: knee depth, hip hinge and back straightness."""

    def get_exercise_name(self) -> str:
        return "squat"

    def get_required_keypoints(self) -> List[str]:
        return ["left_hip", "left_knee", "left_ankle", "left_shoulder"]

    def analyze_points(self, points: Dict[str, Keypoint]) -> FormAnalysisResult:
        hip = points["left_hip"]
        knee = points["left_knee"]
        ankle = points["left_ankle"]
        shoulder = points["left_shoulder"]

        knee_angle = angle_at(hip, knee, ankle)
        hip_angle = angle_at(shoulder, hip, knee)
        back_angle = angle_at(vertical_reference(hip), hip, shoulder)

        angles = [
            AngleMeasurement.within("Knee Angle", knee_angle, *KNEE_RANGE),
            AngleMeasurement.within("Hip Angle", hip_angle, *HIP_RANGE),
            AngleMeasurement.within("Back Angle", back_angle, *BACK_RANGE),
        ]

        if back_angle < BACK_RANGE[0]:
            feedback, feedback_type = "Keep your back straight!", FeedbackType.ERROR
        elif knee_angle > KNEE_RANGE[1]:
            feedback, feedback_type = "Go deeper — lower your hips", FeedbackType.WARNING
        elif knee_angle < KNEE_RANGE[0]:
            feedback, feedback_type = "Don't go too low", FeedbackType.WARNING
        else:
            feedback, feedback_type = "Great squat!", FeedbackType.GOOD

        return self.build_result(angles, feedback, feedback_type)
