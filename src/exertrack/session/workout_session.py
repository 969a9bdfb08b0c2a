"""
Workout session: per-frame pipeline and session-level aggregation.

Frames must be fed in arrival order from a single thread; a session owns its
phase and accuracy state exclusively.
"""
import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..exercise_analysis.base_analyzer import FeedbackType, FormAnalysisResult, insufficient_view_result
from ..exercise_analysis.config_utils import TrainerConfig
from ..exercise_analysis.form_dispatch import get_form_evaluator, normalize_exercise_id
from ..exercise_analysis.pose_utils import Keypoint, has_minimum_confidence, round_half_up
from ..exercises import get_exercise, exercise_name
from ..history.workout_store import FormBreakdown, WorkoutStore, WorkoutStoreError, WorkoutSummary
from .rep_counter import RepPhase, RepPhaseTracker, RepRecord

logger = logging.getLogger(__name__)

DEFAULT_CALORIES_PER_SECOND = 0.15
PAUSED_MESSAGE = "Workout paused"
COMPLETE_MESSAGE = "Workout complete!"


def calories_burned(duration_seconds: float, per_second: float = DEFAULT_CALORIES_PER_SECOND) -> int:
    """Calories as a fixed linear function of session duration."""
    return round_half_up(duration_seconds * per_second)


def form_breakdown(reps_completed: int, average_accuracy: int) -> FormBreakdown:
    """Split completed reps into correct/incorrect using the average accuracy."""
    correct = round_half_up(reps_completed * average_accuracy / 100)
    return FormBreakdown(correct_reps=correct, incorrect_reps=reps_completed - correct)


def summary_message(average_accuracy: int) -> str:
    if average_accuracy >= 90:
        return "Excellent form! Keep up the great work!"
    if average_accuracy >= 80:
        return "Great job! Focus on consistency for even better results."
    if average_accuracy >= 70:
        return "Good effort! Pay attention to the key points to improve form."
    return "Keep practicing! Review the instructions for better form."


class SessionAggregator:
    """Ordered rep records with the running session accuracy."""

    def __init__(self, target_reps: int = 10, calories_per_second: float = DEFAULT_CALORIES_PER_SECOND):
        self.target_reps = target_reps
        self.calories_per_second = calories_per_second
        self._reps: List[RepRecord] = []
        self._average_accuracy = 0

    @property
    def reps(self) -> Tuple[RepRecord, ...]:
        return tuple(self._reps)

    @property
    def reps_completed(self) -> int:
        return len(self._reps)

    @property
    def average_accuracy(self) -> int:
        return self._average_accuracy

    @property
    def is_complete(self) -> bool:
        return self.reps_completed >= self.target_reps

    def add_rep(self, record: RepRecord) -> bool:
        """
        Append a completed rep and recompute the average from all reps.

        Returns:
            False if the target was already reached and the rep was dropped
        """
        if self.is_complete:
            logger.debug("Target of %d reps reached, dropping rep %d", self.target_reps, record.rep_number)
            return False
        self._reps.append(record)
        # Recomputed from scratch each time so no rounding error accumulates
        self._average_accuracy = round_half_up(sum(r.accuracy for r in self._reps) / len(self._reps))
        return True

    def calories_burned(self, duration_seconds: float) -> int:
        return calories_burned(duration_seconds, self.calories_per_second)

    def form_breakdown(self) -> FormBreakdown:
        return form_breakdown(self.reps_completed, self.average_accuracy)


@dataclass(frozen=True)
class FrameResult:
    """Everything a display needs after one frame."""
    analysis: FormAnalysisResult
    phase: RepPhase
    usable: bool  # False when the frame was not applied to the rep counter
    reps_completed: int
    target_reps: int
    average_accuracy: int
    rep: Optional[RepRecord] = None
    phase_changed: bool = False
    completed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = self.analysis.to_dict()
        data.update({
            "repPhase": self.phase.value,
            "usable": self.usable,
            "reps": self.reps_completed,
            "targetReps": self.target_reps,
            "sessionAccuracy": self.average_accuracy,
            "completed": self.completed,
        })
        if self.rep is not None:
            data["rep"] = self.rep.to_dict()
        return data


@dataclass(frozen=True)
class SessionResult:
    """What a finished session hands back to its caller."""
    summary: WorkoutSummary
    reps: Tuple[RepRecord, ...]
    saved: bool
    message: str
    save_error: Optional[str] = None


class WorkoutSession:
    """
    One active workout: confidence gate -> form evaluator -> rep tracker -> aggregator.

    Args:
        exercise_id: Exercise to score; unknown ids use the default evaluator
        config: Trainer configuration (defaults when omitted)
        store: Where the finished session is saved; nothing is saved when None
        user_id: Owner of the saved session
        clock: Time source in seconds, used for durations and rep timestamps
    """

    def __init__(
        self,
        exercise_id: str,
        config: Optional[TrainerConfig] = None,
        store: Optional[WorkoutStore] = None,
        user_id: str = "local",
        clock: Callable[[], float] = time.time,
    ):
        self.config = config or TrainerConfig()
        exercise = get_exercise(exercise_id)
        self.exercise_id = exercise.id if exercise else normalize_exercise_id(exercise_id)
        self.exercise_name = exercise_name(exercise_id)
        self.store = store
        self.user_id = user_id
        self.session_id = str(uuid.uuid4())
        self._clock = clock

        self.evaluator = get_form_evaluator(exercise_id, self.config)
        self.tracker = RepPhaseTracker(self.config.target_reps, self.config.phase_thresholds, clock)
        self.aggregator = SessionAggregator(self.config.target_reps, self.config.calories_per_second)

        self._started_at = clock()
        self._paused_at: Optional[float] = None
        self._paused_total = 0.0
        self._result: Optional[SessionResult] = None
        logger.info("Started %s session %s (target %d reps)", self.exercise_id, self.session_id,
                    self.config.target_reps)

    @property
    def is_complete(self) -> bool:
        return self.aggregator.is_complete

    @property
    def is_paused(self) -> bool:
        return self._paused_at is not None

    @property
    def is_finished(self) -> bool:
        return self._result is not None

    @property
    def elapsed_seconds(self) -> int:
        """Active time in whole seconds, paused time excluded."""
        now = self._paused_at if self._paused_at is not None else self._clock()
        return max(0, int(now - self._started_at - self._paused_total))

    def pause(self) -> None:
        if self._paused_at is None and not self.is_finished:
            self._paused_at = self._clock()
            logger.debug("Session %s paused", self.session_id)

    def resume(self) -> None:
        if self._paused_at is not None:
            self._paused_total += self._clock() - self._paused_at
            self._paused_at = None
            logger.debug("Session %s resumed", self.session_id)

    def _frame_result(self, analysis: FormAnalysisResult, usable: bool, rep: Optional[RepRecord] = None,
                      phase_changed: bool = False) -> FrameResult:
        return FrameResult(
            analysis=analysis,
            phase=self.tracker.phase,
            usable=usable,
            reps_completed=self.aggregator.reps_completed,
            target_reps=self.config.target_reps,
            average_accuracy=self.aggregator.average_accuracy,
            rep=rep,
            phase_changed=phase_changed,
            completed=self.is_complete,
        )

    def process_frame(self, keypoints: Sequence[Keypoint]) -> FrameResult:
        """
        Process one frame of keypoints.

        Frames that fail the confidence gate only produce feedback; they never
        move the rep phase or change the session accuracy. Finished, completed
        and paused sessions ignore frames.
        """
        if self.is_finished or self.is_complete:
            done = FormAnalysisResult(angles=(), accuracy=self.aggregator.average_accuracy,
                                      feedback=COMPLETE_MESSAGE, feedback_type=FeedbackType.GOOD)
            return self._frame_result(done, usable=False)
        if self.is_paused:
            paused = FormAnalysisResult(angles=(), accuracy=0, feedback=PAUSED_MESSAGE,
                                        feedback_type=FeedbackType.WARNING)
            return self._frame_result(paused, usable=False)

        if not has_minimum_confidence(keypoints, self.config.min_confident_keypoints, self.config.min_confidence):
            logger.debug("Skipping frame: fewer than %d confident keypoints", self.config.min_confident_keypoints)
            return self._frame_result(insufficient_view_result(), usable=False)

        analysis = self.evaluator.evaluate(keypoints)
        update = self.tracker.update(analysis)
        if update.rep is not None:
            self.aggregator.add_rep(update.rep)
            if self.is_complete:
                logger.info("Session %s reached %d reps", self.session_id, self.config.target_reps)
        return self._frame_result(analysis, usable=True, rep=update.rep, phase_changed=update.transitioned)

    def build_summary(self) -> WorkoutSummary:
        duration = self.elapsed_seconds
        return WorkoutSummary(
            session_id=self.session_id,
            exercise_id=self.exercise_id,
            exercise_name=self.exercise_name,
            date=datetime.now(timezone.utc).isoformat(timespec="seconds"),
            duration=duration,
            reps_completed=self.aggregator.reps_completed,
            average_accuracy=self.aggregator.average_accuracy,
            calories_burned=self.aggregator.calories_burned(duration),
            form_breakdown=self.aggregator.form_breakdown(),
        )

    def finish(self) -> SessionResult:
        """
        End the session and hand the summary to the store.

        A ``WorkoutStoreError`` from the store is logged and reported through
        ``saved=False``; the summary is still returned. Any other exception is a
        broken store and propagates. Calling finish again returns the same result.
        """
        if self._result is not None:
            return self._result
        self.resume()
        summary = self.build_summary()
        saved, save_error = False, None
        if self.store is not None:
            try:
                self.store.add_session(self.user_id, summary)
                saved = True
            except WorkoutStoreError as e:
                save_error = str(e)
                logger.warning("Failed to save workout %s, summary kept in memory: %s", self.session_id, e)
        self._result = SessionResult(
            summary=summary,
            reps=self.aggregator.reps,
            saved=saved,
            message=summary_message(summary.average_accuracy),
            save_error=save_error,
        )
        logger.info("Finished session %s: %d reps, %d%% accuracy, %ds", self.session_id,
                    summary.reps_completed, summary.average_accuracy, summary.duration)
        return self._result
