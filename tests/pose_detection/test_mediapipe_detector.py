# Unit tests for pose_detection/mediapipe_detector.py landmark conversion

from types import SimpleNamespace

import pytest

pytest.importorskip("cv2")
pytest.importorskip("mediapipe")

from exertrack.exercise_analysis.pose_utils import KEYPOINT_NAMES  # noqa: E402
from exertrack.pose_detection.mediapipe_detector import (  # noqa: E402
    MEDIAPIPE_LANDMARK_INDEX,
    landmarks_to_keypoints,
)


def landmarks():
    # Landmark i sits at x = i / 100 with visibility i / 33
    return [SimpleNamespace(x=i / 100, y=0.5, visibility=i / 33) for i in range(33)]


class TestLandmarksToKeypoints:
    """Test the MediaPipe 33-landmark to 17-keypoint mapping"""

    def test_names_and_order(self):
        keypoints = landmarks_to_keypoints(landmarks(), 640, 480)
        assert [kp.name for kp in keypoints] == KEYPOINT_NAMES

    def test_scaled_to_pixels(self):
        keypoints = landmarks_to_keypoints(landmarks(), 640, 480)
        left_hip = keypoints[KEYPOINT_NAMES.index("left_hip")]
        assert left_hip.x == pytest.approx(0.23 * 640)
        assert left_hip.y == pytest.approx(240)

    def test_visibility_is_score(self):
        keypoints = landmarks_to_keypoints(landmarks(), 640, 480)
        nose = keypoints[0]
        left_ankle = keypoints[KEYPOINT_NAMES.index("left_ankle")]
        assert nose.score == 0.0
        assert left_ankle.score == pytest.approx(27 / 33)

    def test_mapping_covers_every_keypoint(self):
        assert set(MEDIAPIPE_LANDMARK_INDEX) == set(KEYPOINT_NAMES)
