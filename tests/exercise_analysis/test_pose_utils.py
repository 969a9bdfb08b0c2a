# Unit tests for exercise_analysis/pose_utils.py

import math

import pytest

from exertrack.exercise_analysis.pose_utils import (
    KEYPOINT_NAMES,
    Keypoint,
    angle_at,
    confident_keypoints,
    distance,
    find_keypoint,
    has_minimum_confidence,
    round_half_up,
    vertical_reference,
)


class TestAngleAt:
    """Test the three-point joint angle"""

    def test_right_angle(self):
        assert angle_at((0, 1), (0, 0), (1, 0)) == pytest.approx(90.0)

    def test_straight_line(self):
        assert angle_at((0, 0), (1, 0), (2, 0)) == pytest.approx(180.0)

    def test_reflex_angle_is_reflected(self):
        """Rays at -135 and +135 degrees enclose 90 degrees, not 270"""
        a = (-1, -1)
        c = (-1, 1)
        assert angle_at(a, (0, 0), c) == pytest.approx(90.0)

    def test_symmetric_in_outer_points(self):
        a, b, c = (3, 7), (1, 2), (-4, 5)
        assert angle_at(a, b, c) == pytest.approx(angle_at(c, b, a))

    def test_result_within_range(self):
        for a, b, c in [((5, 1), (0, 0), (-3, -2)), ((0, 1), (0, 0), (0, -1)), ((2, 2), (1, 1), (3, 3))]:
            assert 0.0 <= angle_at(a, b, c) <= 180.0

    def test_accepts_keypoints(self):
        a = Keypoint(x=0, y=10, score=0.9)
        b = Keypoint(x=0, y=0, score=0.9)
        c = Keypoint(x=10, y=0, score=0.9)
        assert angle_at(a, b, c) == pytest.approx(90.0)

    def test_nan_propagates(self):
        missing = Keypoint(x=float("nan"), y=float("nan"), score=0.0)
        assert math.isnan(angle_at(missing, (0, 0), (1, 0)))


class TestGeometryHelpers:
    """Test distance, rounding and the vertical reference"""

    def test_distance(self):
        assert distance((0, 0), (3, 4)) == pytest.approx(5.0)

    def test_round_half_up(self):
        assert round_half_up(66.5) == 67
        assert round_half_up(2.5) == 3
        assert round_half_up(2.25) == 2
        assert round_half_up(33.333) == 33

    def test_vertical_reference_below_point(self):
        hip = Keypoint(x=50, y=200, score=0.8)
        ref = vertical_reference(hip)
        assert (ref.x, ref.y) == (50, 300)

    def test_upright_torso_reads_straight(self):
        hip = Keypoint(x=200, y=200, score=0.9)
        shoulder = Keypoint(x=200, y=100, score=0.9)
        assert angle_at(vertical_reference(hip), hip, shoulder) == pytest.approx(180.0)


class TestFindKeypoint:
    """Test keypoint lookup by name and by position"""

    def test_by_name(self):
        keypoints = [Keypoint(x=1, y=2, score=0.9, name="left_knee")]
        assert find_keypoint(keypoints, "left_knee").x == 1

    def test_positional_fallback(self):
        keypoints = [Keypoint(x=float(i), y=0.0, score=0.9) for i in range(len(KEYPOINT_NAMES))]
        assert find_keypoint(keypoints, "left_hip").x == KEYPOINT_NAMES.index("left_hip")

    def test_missing_returns_placeholder(self):
        placeholder = find_keypoint([], "left_ankle")
        assert placeholder.confidence == 0.0
        assert math.isnan(placeholder.x)
        assert placeholder.name == "left_ankle"


class TestConfidenceFilter:
    """Test the keypoint confidence filter and the frame usability gate"""

    def test_filter_keeps_order_and_threshold(self):
        keypoints = [
            Keypoint(x=0, y=0, score=0.5, name="a"),
            Keypoint(x=0, y=0, score=0.49, name="b"),
            Keypoint(x=0, y=0, score=None, name="c"),
            Keypoint(x=0, y=0, score=0.9, name="d"),
        ]
        assert [kp.name for kp in confident_keypoints(keypoints)] == ["a", "d"]

    def test_missing_score_counts_as_zero(self):
        assert Keypoint(x=0, y=0).confidence == 0.0

    def test_gate_needs_ten_confident_keypoints(self):
        nine = [Keypoint(x=0, y=0, score=0.9)] * 9 + [Keypoint(x=0, y=0, score=0.1)] * 8
        ten = [Keypoint(x=0, y=0, score=0.9)] * 10
        assert not has_minimum_confidence(nine)
        assert has_minimum_confidence(ten)

    def test_gate_custom_threshold(self):
        keypoints = [Keypoint(x=0, y=0, score=0.6)] * 10
        assert not has_minimum_confidence(keypoints, min_count=10, threshold=0.7)


class TestAngleRounding:
    """Test that angles reach the tolerance bands as whole degrees"""

    @staticmethod
    def ray(degrees):
        return (math.cos(math.radians(degrees)), math.sin(math.radians(degrees)))

    def test_rounds_down_below_half(self):
        assert angle_at((1, 0), (0, 0), self.ray(110.4)) == 110.0

    def test_rounds_half_up(self):
        assert angle_at((1, 0), (0, 0), self.ray(110.6)) == 111.0
