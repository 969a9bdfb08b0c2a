"""
pose_utils.py - Shared keypoint types, geometry and confidence filtering.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np

# 17-point COCO/MoveNet vocabulary. The index of a name is the positional
# fallback used when a pose source omits keypoint names.
KEYPOINT_NAMES = [
    "nose", "left_eye", "right_eye", "left_ear", "right_ear",
    "left_shoulder", "right_shoulder", "left_elbow", "right_elbow",
    "left_wrist", "right_wrist", "left_hip", "right_hip",
    "left_knee", "right_knee", "left_ankle", "right_ankle",
]
KEYPOINT_INDEX = {name: idx for idx, name in enumerate(KEYPOINT_NAMES)}

DEFAULT_CONFIDENCE_THRESHOLD = 0.5
DEFAULT_MIN_CONFIDENT_KEYPOINTS = 10


@dataclass(frozen=True)
class Keypoint:
    """A single 2D landmark with its confidence score."""
    x: float
    y: float
    score: Optional[float] = None  # confidence in [0, 1]
    name: Optional[str] = None

    @property
    def confidence(self) -> float:
        return self.score if self.score is not None else 0.0


Point = Union[Keypoint, Sequence[float]]


def _xy(point: Point) -> np.ndarray:
    if isinstance(point, Keypoint):
        return np.array([point.x, point.y], dtype=float)
    return np.array([point[0], point[1]], dtype=float)


# --- Math & Geometry Utilities ---
def angle_at(a: Point, b: Point, c: Point) -> float:
    """
    Angle at vertex ``b`` formed by the rays b->a and b->c.

    Uses the atan2 difference of both rays, so the result is always within
    [0, 180] degrees (reflex angles are reflected). The angle is rounded half-up
    to whole degrees before any tolerance band sees it. NaN coordinates
    propagate as NaN; callers decide how to treat them.

    Args:
        a: First point (e.g., hip for knee angle)
        b: Middle point - the angle is measured here
        c: Last point (e.g., ankle for knee angle)
    Returns:
        Angle in degrees
    """
    pa, pb, pc = _xy(a), _xy(b), _xy(c)
    radians = np.arctan2(pc[1] - pb[1], pc[0] - pb[0]) - np.arctan2(pa[1] - pb[1], pa[0] - pb[0])
    angle = abs(float(np.degrees(radians)))
    if angle > 180:
        angle = 360 - angle
    if not np.isfinite(angle):
        return angle
    return float(round_half_up(angle))


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return float(np.linalg.norm(_xy(a) - _xy(b)))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (Python's round() goes to even)."""
    return int(np.floor(value + 0.5))


def is_finite_angle(angle: Optional[float]) -> bool:
    return angle is not None and bool(np.isfinite(angle))


# --- Keypoint lookup ---
def find_keypoint(keypoints: Sequence[Keypoint], name: str) -> Keypoint:
    """
    Find a keypoint by name, falling back to its positional index.

    Some pose sources emit unnamed keypoints in the standard 17-point order,
    so the index lookup must stay. When neither lookup succeeds a placeholder
    with NaN coordinates and zero confidence is returned.
    """
    for kp in keypoints:
        if kp.name == name:
            return kp
    idx = KEYPOINT_INDEX.get(name)
    if idx is not None and idx < len(keypoints):
        return keypoints[idx]
    return Keypoint(x=float("nan"), y=float("nan"), score=0.0, name=name)


def vertical_reference(point: Keypoint, offset: float = 100.0) -> Keypoint:
    """
    A virtual point straight below ``point`` in image coordinates (y grows down).

    Measuring the torso against this reference makes an upright torso read ~180 degrees.
    """
    return Keypoint(x=point.x, y=point.y + offset, score=point.score, name=None)


# --- Confidence filtering ---
def confident_keypoints(
    keypoints: Iterable[Keypoint],
    threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
) -> List[Keypoint]:
    """Keypoints whose confidence is at least ``threshold``, in input order."""
    return [kp for kp in keypoints if kp.confidence >= threshold]


def has_minimum_confidence(
    keypoints: Iterable[Keypoint],
    min_count: int = DEFAULT_MIN_CONFIDENT_KEYPOINTS,
    threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
) -> bool:
    """True if enough keypoints are confident for the frame to be analyzed."""
    return len(confident_keypoints(keypoints, threshold)) >= min_count


def any_low_confidence(keypoints: Iterable[Keypoint], threshold: float = DEFAULT_CONFIDENCE_THRESHOLD) -> bool:
    return any(kp.confidence < threshold for kp in keypoints)
