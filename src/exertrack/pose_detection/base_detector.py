from abc import ABC, abstractmethod
from typing import List

import numpy as np

from ..exercise_analysis.pose_utils import KEYPOINT_NAMES, Keypoint


class BasePoseDetector(ABC):
    """Base class for pose detection implementations."""

    @abstractmethod
    def detect(self, frame: np.ndarray) -> List[Keypoint]:
        """
        Detect the keypoints of one person in the given frame.

        Args:
            frame: Input frame as numpy array (BGR, as read by OpenCV)

        Returns:
            Keypoints in pixel coordinates, ordered as ``get_keypoint_names``;
            an empty list when no person was found
        """
        pass

    def get_keypoint_names(self) -> List[str]:
        """
        Get the list of keypoint names that this detector provides.

        Returns:
            List of keypoint names
        """
        return list(KEYPOINT_NAMES)

    def close(self) -> None:
        """Release the underlying model."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
