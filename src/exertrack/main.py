import argparse
import logging
import os
import sys
from dataclasses import replace

from .exercise_analysis.config_utils import TrainerConfig, load_trainer_config
from .exercise_analysis.form_dispatch import DEFAULT_EXERCISE
from .exercises import exercise_ids
from .history.workout_store import SQLiteWorkoutStore, WorkoutStoreError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ExerTrack exercise form trainer")
    parser.add_argument('--mode', type=str, choices=['camera', 'video'], default='camera',
                        help='Run mode: camera (default) or video')
    parser.add_argument('--video', type=str, help='Path to the video file to analyze (required if mode=video)')
    parser.add_argument('--exercise', type=str, default=DEFAULT_EXERCISE, choices=exercise_ids() + ['pushup'],
                        help=f'Exercise to analyze (default: {DEFAULT_EXERCISE})')
    parser.add_argument('--target-reps', type=int, help='Repetitions to complete (default from config)')
    parser.add_argument('--camera', type=int, default=0, help='Camera device ID')
    parser.add_argument('--config', type=str, help='Path to a trainer config JSON file')
    parser.add_argument('--db', type=str, default='exertrack.db', help='Workout history database')
    parser.add_argument('--user', type=str, default='local', help='User the workout is saved for')
    parser.add_argument('--no-voice', action='store_true', help='Disable spoken feedback')
    parser.add_argument('--log-level', type=str, default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Logging level')
    return parser


def load_config(args) -> TrainerConfig:
    config = load_trainer_config(args.config)
    if args.target_reps is not None:
        config = replace(config, target_reps=args.target_reps)
    return config


def main(argv=None) -> int:
    """Main entry point for the ExerTrack trainer."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format='%(asctime)s %(levelname)s %(message)s')

    if args.mode == 'video':
        if not args.video:
            parser.error("--video is required when mode is 'video'")
        if not os.path.isfile(args.video):
            logger.error("Video file not found: %s", args.video)
            return 1

    try:
        config = load_config(args)
    except (OSError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    # Imported here so --help works without the camera stack
    from .pose_detection.mediapipe_detector import MediaPipePoseDetector
    from .trainer import ExerciseTrainer

    voice = None
    if not args.no_voice:
        from .feedback.voice_feedback import VoiceFeedback
        voice = VoiceFeedback()

    try:
        with SQLiteWorkoutStore(args.db) as store, MediaPipePoseDetector(config.min_confidence) as detector:
            trainer = ExerciseTrainer(args.exercise, detector, config=config, voice=voice,
                                      store=store, user_id=args.user)
            logger.info("Trainer created successfully, starting %s mode", args.mode)
            if args.mode == 'video':
                result = trainer.run_video(args.video)
            else:
                result = trainer.start(camera_id=args.camera)
    except RuntimeError as e:
        logger.error("%s", e)
        return 1
    except WorkoutStoreError as e:
        logger.error("Workout history unavailable: %s", e)
        return 1
    finally:
        if voice is not None:
            voice.close()

    summary = result.summary
    print(f"{summary.exercise_name}: {summary.reps_completed} reps, {summary.average_accuracy}% accuracy, "
          f"{summary.calories_burned} kcal in {summary.duration}s")
    print(result.message)
    return 0


if __name__ == "__main__":
    sys.exit(main())
