import logging
from typing import Optional, Union

import cv2
import numpy as np

from .exercise_analysis.base_analyzer import FeedbackType
from .exercise_analysis.config_utils import TrainerConfig
from .feedback.voice_feedback import VoiceFeedback
from .history.workout_store import WorkoutStore
from .pose_detection.base_detector import BasePoseDetector
from .session.workout_session import FrameResult, SessionResult, WorkoutSession

logger = logging.getLogger(__name__)

WINDOW_NAME = "ExerTrack"

# BGR colours for the feedback line
FEEDBACK_COLOURS = {
    FeedbackType.GOOD: (0, 255, 0),
    FeedbackType.WARNING: (0, 200, 255),
    FeedbackType.ERROR: (0, 0, 255),
}


class ExerciseTrainer:
    """Camera/video front end: detector -> workout session -> voice -> overlay."""

    def __init__(
        self,
        exercise_id: str,
        detector: BasePoseDetector,
        config: Optional[TrainerConfig] = None,
        voice: Optional[VoiceFeedback] = None,
        store: Optional[WorkoutStore] = None,
        user_id: str = "local",
        display: bool = True,
    ):
        """
        Initialize the trainer.

        Args:
            exercise_id: Exercise to analyze
            detector: Pose source; owned by the caller
            config: Trainer configuration
            voice: Spoken feedback, disabled when None
            store: Where the finished workout is saved
            user_id: Owner of the saved workout
            display: Show the annotated frames in an OpenCV window
        """
        self.detector = detector
        self.voice = voice
        self.display = display
        self.session = WorkoutSession(exercise_id, config=config, store=store, user_id=user_id)
        self.cap = None
        self.is_running = False

    def process_frame(self, frame: np.ndarray) -> FrameResult:
        """
        Process a single frame.

        Args:
            frame: Input frame; annotated in place

        Returns:
            The session's result for this frame
        """
        keypoints = self.detector.detect(frame)
        result = self.session.process_frame(keypoints)

        if self.voice is not None:
            feedback = self.voice.generate_feedback(result)
            if feedback:
                self.voice.speak(feedback)

        self._draw_overlay(frame, keypoints, result)
        return result

    def _draw_overlay(self, frame: np.ndarray, keypoints, result: FrameResult) -> None:
        for keypoint in keypoints:
            if keypoint.confidence >= self.session.config.min_confidence:
                cv2.circle(frame, (int(keypoint.x), int(keypoint.y)), 5, (0, 255, 0), -1)

        analysis = result.analysis
        lines = [
            (f"Exercise: {self.session.exercise_name}", (0, 255, 0)),
            (f"Reps: {result.reps_completed}/{result.target_reps}", (0, 255, 0)),
            (f"Phase: {result.phase.value}", (0, 255, 0)),
            (f"Accuracy: {analysis.accuracy}%  Session: {result.average_accuracy}%", (255, 255, 0)),
            (analysis.feedback, FEEDBACK_COLOURS[analysis.feedback_type]),
        ]
        for idx, (text, colour) in enumerate(lines):
            cv2.putText(frame, text, (10, 30 * (idx + 1)), cv2.FONT_HERSHEY_SIMPLEX, 0.6, colour, 2)

    def _run(self, source: Union[int, str]) -> SessionResult:
        self.cap = cv2.VideoCapture(source)
        if not self.cap.isOpened():
            self.cap.release()
            raise RuntimeError(f"Failed to open video source {source!r}")
        self.is_running = True
        try:
            while self.is_running and not self.session.is_complete:
                ret, frame = self.cap.read()
                if not ret:
                    break
                self.process_frame(frame)
                if self.display:
                    cv2.imshow(WINDOW_NAME, frame)
                    key = cv2.waitKey(1) & 0xFF
                    if key == ord('q'):
                        break
                    if key == ord('p'):
                        if self.session.is_paused:
                            self.session.resume()
                        else:
                            self.session.pause()
        except KeyboardInterrupt:
            logger.info("KeyboardInterrupt received, finishing workout")
        finally:
            self.stop()
        return self.finish()

    def start(self, camera_id: int = 0) -> SessionResult:
        """
        Run the trainer on a camera until the target is reached or ``q`` is pressed.

        Args:
            camera_id: Camera device ID
        """
        return self._run(camera_id)

    def run_video(self, video_path: str) -> SessionResult:
        """Run the trainer over a video file."""
        return self._run(video_path)

    def stop(self) -> None:
        """Stop the trainer and release resources."""
        self.is_running = False
        if self.cap is not None:
            self.cap.release()
            self.cap = None
        if self.display:
            cv2.destroyAllWindows()

    def finish(self) -> SessionResult:
        result = self.session.finish()
        logger.info("%s: %s", self.session.exercise_name, result.message)
        if self.voice is not None:
            self.voice.speak(result.message)
        return result
