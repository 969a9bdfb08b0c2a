# Unit tests for session/workout_session.py

import logging

import pytest

from exertrack.exercise_analysis.base_analyzer import LOW_CONFIDENCE_MESSAGE, FeedbackType
from exertrack.exercise_analysis.config_utils import TrainerConfig
from exertrack.exercise_analysis.squat_analyzer import SquatEvaluator
from exertrack.history.workout_store import SQLiteWorkoutStore, WorkoutStore, WorkoutStoreError
from exertrack.session.rep_counter import RepPhase, RepRecord
from exertrack.session.workout_session import (
    COMPLETE_MESSAGE,
    PAUSED_MESSAGE,
    SessionAggregator,
    WorkoutSession,
    calories_burned,
    form_breakdown,
    summary_message,
)


def rep(number, accuracy):
    return RepRecord(rep_number=number, accuracy=accuracy, angles=(), timestamp=0.0)


class FailingStore(WorkoutStore):
    def __init__(self, error=None):
        self.error = error or WorkoutStoreError("disk full")

    def add_session(self, user_id, summary):
        raise self.error

    def get_sessions(self, user_id):
        return []

    def delete_session(self, session_id):
        pass

    def clear_sessions(self, user_id):
        pass


@pytest.fixture
def low_view_frame(squat_points, make_frame):
    # Only the four squat joints are confident
    return make_frame(squat_points, score=0.1, scores={name: 0.9 for name in squat_points})


class TestSessionAggregator:
    """Test session-level accuracy, calories and form breakdown"""

    def test_average_of_reps(self):
        aggregator = SessionAggregator()
        for number, accuracy in enumerate([90, 80, 70], start=1):
            aggregator.add_rep(rep(number, accuracy))
        assert aggregator.reps_completed == 3
        assert aggregator.average_accuracy == 80

    def test_average_rounds_half_up(self):
        aggregator = SessionAggregator()
        aggregator.add_rep(rep(1, 80))
        aggregator.add_rep(rep(2, 85))
        assert aggregator.average_accuracy == 83

    def test_empty_session(self):
        aggregator = SessionAggregator()
        assert aggregator.average_accuracy == 0
        assert aggregator.form_breakdown().correct_reps == 0

    def test_drops_reps_past_target(self):
        aggregator = SessionAggregator(target_reps=2)
        assert aggregator.add_rep(rep(1, 100))
        assert aggregator.add_rep(rep(2, 100))
        assert not aggregator.add_rep(rep(3, 0))
        assert aggregator.reps_completed == 2
        assert aggregator.average_accuracy == 100
        assert aggregator.is_complete

    def test_calories(self):
        assert calories_burned(120) == 18
        assert calories_burned(0) == 0
        assert calories_burned(10) == 2  # 1.5 rounds up

    def test_form_breakdown(self):
        breakdown = form_breakdown(10, 80)
        assert breakdown.correct_reps == 8
        assert breakdown.incorrect_reps == 2


class TestSummaryMessage:
    """Test the end-of-workout message thresholds"""

    @pytest.mark.parametrize("accuracy, expected", [
        (95, "Excellent form! Keep up the great work!"),
        (90, "Excellent form! Keep up the great work!"),
        (85, "Great job! Focus on consistency for even better results."),
        (70, "Good effort! Pay attention to the key points to improve form."),
        (69, "Keep practicing! Review the instructions for better form."),
    ])
    def test_thresholds(self, accuracy, expected):
        assert summary_message(accuracy) == expected


class TestWorkoutSession:
    """Test the per-frame workout pipeline"""

    def test_good_frames_complete_a_rep(self, good_squat_frame, clock):
        session = WorkoutSession("squat", clock=clock)
        results = [session.process_frame(good_squat_frame) for _ in range(4)]

        assert all(r.usable for r in results)
        assert results[-1].rep is not None
        assert results[-1].reps_completed == 1
        assert results[-1].average_accuracy == 100
        assert results[-1].phase == RepPhase.STARTING
        assert results[-1].analysis.feedback == "Great squat!"

    def test_low_view_frame_changes_nothing(self, good_squat_frame, low_view_frame, clock):
        session = WorkoutSession("squat", clock=clock)
        session.process_frame(good_squat_frame)
        assert session.tracker.phase == RepPhase.DOWN

        result = session.process_frame(low_view_frame)

        assert not result.usable
        assert result.analysis.feedback == LOW_CONFIDENCE_MESSAGE
        assert result.analysis.feedback_type == FeedbackType.WARNING
        assert result.phase == RepPhase.DOWN
        assert session.aggregator.reps_completed == 0

    def test_low_view_frames_never_count_reps(self, low_view_frame, clock):
        session = WorkoutSession("squat", clock=clock)
        for _ in range(8):
            session.process_frame(low_view_frame)
        assert session.tracker.phase == RepPhase.STARTING
        assert session.aggregator.reps_completed == 0

    def test_completes_at_target(self, good_squat_frame, clock):
        session = WorkoutSession("squat", config=TrainerConfig(target_reps=1), clock=clock)
        results = [session.process_frame(good_squat_frame) for _ in range(4)]
        assert results[-1].completed
        assert session.is_complete

        after = session.process_frame(good_squat_frame)
        assert not after.usable
        assert after.analysis.feedback == COMPLETE_MESSAGE
        assert after.reps_completed == 1

    def test_paused_session_ignores_frames(self, good_squat_frame, clock):
        session = WorkoutSession("squat", clock=clock)
        session.pause()
        result = session.process_frame(good_squat_frame)
        assert result.analysis.feedback == PAUSED_MESSAGE
        assert session.tracker.phase == RepPhase.STARTING

        session.resume()
        assert session.process_frame(good_squat_frame).usable

    def test_paused_time_excluded_from_duration(self, clock):
        session = WorkoutSession("squat", clock=clock)
        clock.advance(10)
        session.pause()
        clock.advance(20)
        assert session.elapsed_seconds == 10
        session.resume()
        clock.advance(5)

        summary = session.finish().summary

        assert summary.duration == 15
        assert summary.calories_burned == 2

    def test_unknown_exercise_uses_squat_evaluator(self, clock):
        session = WorkoutSession("Deadlift", clock=clock)
        assert isinstance(session.evaluator, SquatEvaluator)
        assert session.exercise_id == "deadlift"
        assert session.exercise_name == "Deadlift"

    def test_pushup_alias_is_canonical(self, clock):
        session = WorkoutSession("pushup", clock=clock)
        assert session.exercise_id == "push-up"
        assert session.exercise_name == "Push-Up"

    def test_frame_result_to_dict(self, good_squat_frame, clock):
        data = WorkoutSession("squat", clock=clock).process_frame(good_squat_frame).to_dict()
        assert data["accuracy"] == 100
        assert data["feedbackType"] == "good"
        assert data["repPhase"] == "down"
        assert data["reps"] == 0


class TestFinishSession:
    """Test finishing a session and handing it to the store"""

    def test_summary_fields(self, good_squat_frame, clock):
        session = WorkoutSession("squat", clock=clock)
        for _ in range(8):
            session.process_frame(good_squat_frame)
        clock.advance(120)

        result = session.finish()
        summary = result.summary

        assert summary.exercise_id == "squat"
        assert summary.exercise_name == "Squat"
        assert summary.reps_completed == 2
        assert summary.average_accuracy == 100
        assert summary.duration == 120
        assert summary.calories_burned == 18
        assert summary.form_breakdown.correct_reps == 2
        assert len(result.reps) == 2
        assert result.message == "Excellent form! Keep up the great work!"
        assert not result.saved

    def test_saved_to_store(self, clock):
        with SQLiteWorkoutStore(":memory:") as store:
            session = WorkoutSession("plank", store=store, user_id="alice", clock=clock)
            result = session.finish()

            assert result.saved
            sessions = store.get_sessions("alice")
            assert [s.session_id for s in sessions] == [session.session_id]

    def test_store_failure_keeps_summary(self, clock, caplog):
        session = WorkoutSession("squat", store=FailingStore(), clock=clock)
        with caplog.at_level(logging.WARNING):
            result = session.finish()

        assert not result.saved
        assert result.save_error == "disk full"
        assert result.summary.exercise_id == "squat"
        assert "disk full" in caplog.text

    def test_store_error_subclass_is_recovered(self, clock):
        class QuotaExceeded(WorkoutStoreError):
            pass

        session = WorkoutSession("squat", store=FailingStore(QuotaExceeded("quota")), clock=clock)
        result = session.finish()

        assert not result.saved
        assert result.save_error == "quota"

    def test_unexpected_store_exception_propagates(self, clock):
        session = WorkoutSession("squat", store=FailingStore(RuntimeError("bug in store")), clock=clock)
        with pytest.raises(RuntimeError, match="bug in store"):
            session.finish()

    def test_finish_is_idempotent(self, good_squat_frame, clock):
        session = WorkoutSession("squat", clock=clock)
        first = session.finish()
        assert session.finish() is first

        result = session.process_frame(good_squat_frame)
        assert not result.usable
        assert session.tracker.phase == RepPhase.STARTING
