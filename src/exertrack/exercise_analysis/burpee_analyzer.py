from enum import Enum
from typing import Dict, List

from .base_analyzer import (
    AngleMeasurement,
    BaseFormEvaluator,
    FeedbackType,
    FormAnalysisResult,
    register_form_evaluator,
)
from .pose_utils import Keypoint, angle_at, vertical_reference


class BurpeePhase(Enum):
    """Movement pattern seen in a single burpee frame."""
    STANDING = "standing"
    PLANK = "plank"
    PUSHUP = "pushup"
    JUMP = "jump"


EXTENDED_THRESHOLD = 160     # body and knee both above this: straight line
SQUAT_KNEE_THRESHOLD = 120   # knee below this: squatting down or landing
PUSHUP_ELBOW_THRESHOLD = 120
HORIZONTAL_TORSO_MAX = 135   # torso tilt below this: body is closer to horizontal

EXTENDED_RANGE = (165, 180)
ELBOW_RANGE = (80, 100)
SQUAT_DEPTH_RANGE = (80, 110)


@register_form_evaluator("burpee")
class BurpeeEvaluator(BaseFormEvaluator):
    """
    Burpee evaluator with per-frame phase detection.

    A burpee chains a squat, a plank, a push-up and a jump, so the frame is
    first classified into one of those patterns and only the angles relevant
    to that pattern are scored.
    """

    def get_exercise_name(self) -> str:
        return "burpee"

    def get_required_keypoints(self) -> List[str]:
        return ["left_shoulder", "left_elbow", "left_wrist", "left_hip", "left_knee", "left_ankle"]

    def get_critical_keypoints(self) -> List[str]:
        return ["left_shoulder", "left_hip", "left_knee", "left_ankle"]

    def analyze_points(self, points: Dict[str, Keypoint]) -> FormAnalysisResult:
        shoulder = points["left_shoulder"]
        wrist = points["left_wrist"]
        hip = points["left_hip"]
        knee = points["left_knee"]
        ankle = points["left_ankle"]

        knee_angle = angle_at(hip, knee, ankle)
        body_angle = angle_at(shoulder, hip, ankle)
        elbow_angle = angle_at(shoulder, points["left_elbow"], wrist)
        torso_tilt = angle_at(vertical_reference(hip), hip, shoulder)

        if body_angle > EXTENDED_THRESHOLD and knee_angle > EXTENDED_THRESHOLD:
            if torso_tilt < HORIZONTAL_TORSO_MAX:
                return self._analyze_plank(body_angle, knee_angle, elbow_angle)
            upright = [
                AngleMeasurement.within("Body Upright", body_angle, *EXTENDED_RANGE),
                AngleMeasurement.within("Legs Extended", knee_angle, *EXTENDED_RANGE),
            ]
            if wrist.y < shoulder.y:
                return self.build_result(upright, "Great jump! Land softly", FeedbackType.GOOD,
                                         BurpeePhase.JUMP.value)
            return self.build_result(upright, "Good! Now drop down", FeedbackType.GOOD,
                                     BurpeePhase.STANDING.value)

        if knee_angle < SQUAT_KNEE_THRESHOLD:
            angles = [AngleMeasurement.within("Squat Depth", knee_angle, *SQUAT_DEPTH_RANGE)]
            return self.build_result(angles, "Now jump up!", FeedbackType.GOOD, BurpeePhase.STANDING.value)

        return self.build_result([], "Get into position", FeedbackType.WARNING, BurpeePhase.STANDING.value)

    def _analyze_plank(self, body_angle: float, knee_angle: float, elbow_angle: float) -> FormAnalysisResult:
        angles = [
            AngleMeasurement.within("Body Straight", body_angle, *EXTENDED_RANGE),
            AngleMeasurement.within("Plank Hold", knee_angle, *EXTENDED_RANGE),
        ]
        if elbow_angle < PUSHUP_ELBOW_THRESHOLD:
            elbow = AngleMeasurement.within("Elbow Angle", elbow_angle, *ELBOW_RANGE)
            angles.append(elbow)
            if elbow.is_correct:
                return self.build_result(angles, "Perfect push-up!", FeedbackType.GOOD, BurpeePhase.PUSHUP.value)
            return self.build_result(angles, "Lower your chest more", FeedbackType.WARNING,
                                     BurpeePhase.PUSHUP.value)
        if body_angle >= EXTENDED_RANGE[0]:
            return self.build_result(angles, "Hold plank, then push-up", FeedbackType.GOOD,
                                     BurpeePhase.PLANK.value)
        return self.build_result(angles, "Keep body straight!", FeedbackType.ERROR, BurpeePhase.PLANK.value)
