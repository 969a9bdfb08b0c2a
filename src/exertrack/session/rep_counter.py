import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from ..exercise_analysis.base_analyzer import AngleMeasurement, FormAnalysisResult
from ..exercise_analysis.config_utils import PhaseThresholds

logger = logging.getLogger(__name__)


class RepPhase(Enum):
    """Repetition phases tracked across frames."""
    STARTING = "starting"  # Starting position
    DOWN = "down"          # Lowering phase
    BOTTOM = "bottom"      # Deepest point reached
    UP = "up"              # Rising phase


@dataclass(frozen=True)
class RepRecord:
    """One completed repetition."""
    rep_number: int
    accuracy: int
    angles: Tuple[AngleMeasurement, ...]
    timestamp: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "repNumber": self.rep_number,
            "accuracy": self.accuracy,
            "angles": [m.to_dict() for m in self.angles],
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class PhaseUpdate:
    """Outcome of feeding one frame to the tracker."""
    previous: RepPhase
    current: RepPhase
    rep: Optional[RepRecord] = None

    @property
    def transitioned(self) -> bool:
        return self.previous != self.current


class RepPhaseTracker:
    """
    Accuracy-driven repetition state machine.

    starting -> down    frame accuracy > start_descent
    down -> bottom      frame accuracy > bottom_reached
    bottom -> up        always, on the next frame
    up -> starting      frame accuracy > rep_complete; records the rep

    At most one transition happens per frame, and once ``target_reps`` reps
    are recorded the tracker ignores further frames.
    """

    def __init__(
        self,
        target_reps: int = 10,
        thresholds: Optional[PhaseThresholds] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.target_reps = target_reps
        self.thresholds = thresholds or PhaseThresholds()
        self._clock = clock
        self._phase = RepPhase.STARTING
        self._reps_completed = 0

    @property
    def phase(self) -> RepPhase:
        return self._phase

    @property
    def reps_completed(self) -> int:
        return self._reps_completed

    @property
    def is_finished(self) -> bool:
        return self._reps_completed >= self.target_reps

    def reset(self) -> None:
        self._phase = RepPhase.STARTING
        self._reps_completed = 0

    def update(self, result: FormAnalysisResult) -> PhaseUpdate:
        """
        Advance the state machine with one evaluated frame.

        Args:
            result: Form analysis of the frame; only usable frames belong here

        Returns:
            PhaseUpdate with the previous and current phase and any completed rep
        """
        previous = self._phase
        if self.is_finished:
            return PhaseUpdate(previous=previous, current=previous)

        accuracy = result.accuracy
        rep = None
        if previous == RepPhase.STARTING:
            if accuracy > self.thresholds.start_descent:
                self._phase = RepPhase.DOWN
        elif previous == RepPhase.DOWN:
            if accuracy > self.thresholds.bottom_reached:
                self._phase = RepPhase.BOTTOM
        elif previous == RepPhase.BOTTOM:
            self._phase = RepPhase.UP
        elif previous == RepPhase.UP:
            if accuracy > self.thresholds.rep_complete:
                self._reps_completed += 1
                rep = RepRecord(
                    rep_number=self._reps_completed,
                    accuracy=accuracy,
                    angles=result.angles,
                    timestamp=self._clock(),
                )
                self._phase = RepPhase.STARTING
                logger.info("Rep %d/%d completed, accuracy %d%%", rep.rep_number, self.target_reps, accuracy)

        if self._phase != previous:
            logger.debug("Phase: %s -> %s", previous.value, self._phase.value)
        return PhaseUpdate(previous=previous, current=self._phase, rep=rep)
