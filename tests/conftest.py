import math

import pytest

from exertrack.exercise_analysis.pose_utils import KEYPOINT_NAMES, Keypoint


def _polar(origin, length, degrees):
    """Point at ``length`` from ``origin``; 0 degrees points straight down the image, 90 to the right."""
    rad = math.radians(degrees)
    return (origin[0] + length * math.sin(rad), origin[1] + length * math.cos(rad))


def _make_frame(points, score=0.9, scores=None):
    """Full 17-keypoint frame; joints not given sit at the origin with ``score``."""
    scores = scores or {}
    frame = []
    for name in KEYPOINT_NAMES:
        x, y = points.get(name, (0.0, 0.0))
        frame.append(Keypoint(x=float(x), y=float(y), score=scores.get(name, score), name=name))
    return frame


class FakeClock:
    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def polar():
    return _polar


@pytest.fixture
def make_frame():
    return _make_frame


@pytest.fixture
def clock():
    return FakeClock(1000.0)


@pytest.fixture
def squat_points():
    """Side-view squat bottom: back 175, hip 90, knee 95 degrees."""
    hip = (200.0, 200.0)
    knee = _polar(hip, 100, 85)
    return {
        "left_hip": hip,
        "left_shoulder": _polar(hip, 100, 175),
        "left_knee": knee,
        "left_ankle": (knee[0], knee[1] + 100),
    }


@pytest.fixture
def good_squat_frame(squat_points):
    return _make_frame(squat_points)
