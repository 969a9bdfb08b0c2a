import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "trainer_config.json")
DEFAULT_ALIGNMENT_TOLERANCE = 30.0  # pixels between shoulder and elbow x


@dataclass(frozen=True)
class PhaseThresholds:
    """Frame accuracy (0-100) a rep phase must exceed to advance."""
    start_descent: float = 75   # starting -> down
    bottom_reached: float = 80  # down -> bottom
    rep_complete: float = 75    # up -> starting, rep recorded


@dataclass(frozen=True)
class TrainerConfig:
    """Configuration consumed by a workout session."""
    target_reps: int = 10
    min_confidence: float = 0.5  # keypoint confidence threshold
    min_confident_keypoints: int = 10  # frame usability gate
    calories_per_second: float = 0.15
    plank_alignment_tolerance: float = DEFAULT_ALIGNMENT_TOLERANCE
    phase_thresholds: PhaseThresholds = field(default_factory=PhaseThresholds)

    def __post_init__(self):
        if self.target_reps < 1:
            raise ValueError(f"target_reps must be positive, got {self.target_reps}")
        if not 0.0 <= self.min_confidence <= 1.0:
            raise ValueError(f"min_confidence must be within [0, 1], got {self.min_confidence}")
        if self.min_confident_keypoints < 0:
            raise ValueError(f"min_confident_keypoints must not be negative, got {self.min_confident_keypoints}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrainerConfig":
        """Build a config from the JSON layout; missing keys keep their defaults."""
        session = data.get("session", {})
        evaluators = data.get("evaluators", {})
        kwargs = {k: session[k] for k in
                  ("target_reps", "min_confidence", "min_confident_keypoints", "calories_per_second")
                  if k in session}
        if "plank_alignment_tolerance" in evaluators:
            kwargs["plank_alignment_tolerance"] = evaluators["plank_alignment_tolerance"]
        if "phase_thresholds" in data:
            kwargs["phase_thresholds"] = PhaseThresholds(**data["phase_thresholds"])
        return cls(**kwargs)


def load_trainer_config(config_path: Optional[str] = None) -> TrainerConfig:
    """Load trainer config from JSON file."""
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    with open(config_path, "r") as f:
        data = json.load(f)
    logger.debug("Loaded trainer config from %s", config_path)
    return TrainerConfig.from_dict(data)
