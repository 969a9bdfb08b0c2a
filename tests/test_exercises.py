# Unit tests for the exercise catalogue

import pytest

from exertrack.exercise_analysis.form_dispatch import supported_exercises
from exertrack.exercises import EXERCISES, exercise_ids, exercise_name, get_exercise


class TestExerciseCatalogue:
    """Test catalogue lookups"""

    def test_ids(self):
        assert exercise_ids() == ["squat", "push-up", "plank", "lunge", "burpee", "deadlift"]

    @pytest.mark.parametrize("exercise_id", ["push-up", "pushup", " Push-Up "])
    def test_pushup_aliases(self, exercise_id):
        assert get_exercise(exercise_id).name == "Push-Up"

    def test_unknown_exercise(self):
        assert get_exercise("handstand") is None
        assert exercise_name("single_leg_squat") == "Single Leg Squat"

    def test_every_evaluator_is_catalogued(self):
        assert set(supported_exercises()) <= set(exercise_ids())

    def test_entries_are_complete(self):
        for exercise in EXERCISES:
            assert exercise.instructions
            assert exercise.key_points
            assert exercise.common_mistakes
            assert exercise.difficulty in ("Beginner", "Intermediate", "Advanced")
