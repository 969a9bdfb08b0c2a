import logging
from typing import List, Sequence

import cv2
import mediapipe as mp
import numpy as np

from ..exercise_analysis.pose_utils import KEYPOINT_NAMES, Keypoint
from .base_detector import BasePoseDetector

logger = logging.getLogger(__name__)

# MediaPipe Pose landmark index for each of the 17 keypoint names, in order
MEDIAPIPE_LANDMARK_INDEX = {
    "nose": 0,
    "left_eye": 2,
    "right_eye": 5,
    "left_ear": 7,
    "right_ear": 8,
    "left_shoulder": 11,
    "right_shoulder": 12,
    "left_elbow": 13,
    "right_elbow": 14,
    "left_wrist": 15,
    "right_wrist": 16,
    "left_hip": 23,
    "right_hip": 24,
    "left_knee": 25,
    "right_knee": 26,
    "left_ankle": 27,
    "right_ankle": 28,
}


def landmarks_to_keypoints(landmarks: Sequence, width: int, height: int) -> List[Keypoint]:
    """
    Convert MediaPipe's 33 normalized landmarks to the 17 named keypoints.

    Args:
        landmarks: Objects with ``x``, ``y`` (normalized to [0, 1]) and ``visibility``
        width: Frame width in pixels
        height: Frame height in pixels

    Returns:
        Keypoints in pixel coordinates, with the landmark visibility as score
    """
    keypoints = []
    for name in KEYPOINT_NAMES:
        landmark = landmarks[MEDIAPIPE_LANDMARK_INDEX[name]]
        keypoints.append(Keypoint(
            x=float(landmark.x) * width,
            y=float(landmark.y) * height,
            score=float(landmark.visibility),
            name=name,
        ))
    return keypoints


class MediaPipePoseDetector(BasePoseDetector):
    """MediaPipe implementation of pose detection."""

    def __init__(self, min_detection_confidence: float = 0.5, min_tracking_confidence: float = 0.5,
                 model_complexity: int = 1):
        """
        Initialize the MediaPipe pose detector.

        Args:
            min_detection_confidence: Minimum confidence for pose detection
            min_tracking_confidence: Minimum confidence for pose tracking
            model_complexity: Complexity of the pose landmark model (0, 1, or 2)
        """
        self.mp_pose = mp.solutions.pose
        self.pose = self.mp_pose.Pose(
            static_image_mode=False,
            model_complexity=model_complexity,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence
        )

    def detect(self, frame: np.ndarray) -> List[Keypoint]:
        # Convert BGR to RGB
        frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        results = self.pose.process(frame_rgb)

        if not results.pose_landmarks:
            logger.debug("No pose detected")
            return []

        height, width = frame.shape[:2]
        return landmarks_to_keypoints(results.pose_landmarks.landmark, width, height)

    def close(self) -> None:
        self.pose.close()
