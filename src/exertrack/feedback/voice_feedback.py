import logging
import queue
import threading
import time
from typing import Callable, Optional

import pyttsx3

from ..exercise_analysis.base_analyzer import FeedbackType
from ..session.workout_session import PAUSED_MESSAGE, FrameResult

logger = logging.getLogger(__name__)

EXERCISE_COMPLETE_MESSAGE = "Great work! Exercise complete!"


class VoiceFeedback:
    """Voice feedback system for exercise form correction."""

    def __init__(
        self,
        rate: int = 150,
        volume: float = 1.0,
        cooldown: float = 4.0,
        debounce_frames: int = 2,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the voice feedback system.

        Args:
            rate: Speech rate (words per minute)
            volume: Speech volume (0.0 to 1.0)
            cooldown: Minimum seconds between two form messages
            debounce_frames: Frames a warning or error must persist before it is spoken
            clock: Time source in seconds
        """
        self.engine = pyttsx3.init()
        self.engine.setProperty('rate', rate)
        self.engine.setProperty('volume', volume)

        self._tts_queue = queue.Queue()
        self._tts_thread = threading.Thread(target=self._tts_worker, daemon=True)
        self._tts_thread.start()

        self.cooldown = cooldown
        self._clock = clock
        self._last_feedback_time = None
        self._last_feedback_message = None
        self._last_violation = None
        self._violation_persist_count = 0
        self._violation_debounce_threshold = debounce_frames

    def generate_feedback(self, frame_result: FrameResult) -> Optional[str]:
        """
        Pick the sentence to speak for one processed frame.

        Args:
            frame_result: Output of ``WorkoutSession.process_frame``

        Returns:
            Feedback message if any, None otherwise
        """
        now = self._clock()

        # Rep announcements are never held back by the cooldown
        if frame_result.rep is not None:
            if frame_result.completed:
                feedback = EXERCISE_COMPLETE_MESSAGE
            else:
                feedback = f"Rep {frame_result.rep.rep_number}"
            self._last_feedback_message = feedback
            self._last_feedback_time = now
            return feedback

        analysis = frame_result.analysis
        if analysis.feedback == PAUSED_MESSAGE or (frame_result.completed and not frame_result.usable):
            return None

        feedback = analysis.feedback
        # Debounce logic: only speak if violation persists for threshold frames
        if analysis.feedback_type in (FeedbackType.WARNING, FeedbackType.ERROR):
            if feedback == self._last_violation:
                self._violation_persist_count += 1
            else:
                self._violation_persist_count = 1
                self._last_violation = feedback
            if self._violation_persist_count < self._violation_debounce_threshold:
                return None
        else:
            self._violation_persist_count = 0
            self._last_violation = None

        # Only speak if feedback message changes
        if feedback == self._last_feedback_message:
            return None
        if self._last_feedback_time is not None and now - self._last_feedback_time < self.cooldown:
            return None
        self._last_feedback_message = feedback
        self._last_feedback_time = now
        return feedback

    def speak(self, message: str) -> None:
        """
        Queue the given message to be spoken by the background TTS thread.

        Args:
            message: Message to speak
        """
        self._tts_queue.put(message)

    def _tts_worker(self):
        while True:
            msg = self._tts_queue.get()
            if msg is None:
                break
            try:
                self.engine.say(msg)
                self.engine.runAndWait()
            except RuntimeError as e:
                logger.warning("Speech engine failed on %r: %s", msg, e)

    def close(self, timeout: float = 2.0) -> None:
        """Stop the TTS worker once the queued messages are spoken."""
        if self._tts_thread.is_alive():
            self._tts_queue.put(None)
            self._tts_thread.join(timeout)
