"""
Exercise catalogue.

Read-only descriptions of the supported exercises. Scoring lives in
``exercise_analysis``; an exercise without a dedicated evaluator (deadlift)
is scored by the default evaluator.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .exercise_analysis.form_dispatch import normalize_exercise_id

EXERCISE_ALIASES = {"pushup": "push-up"}


@dataclass(frozen=True)
class Exercise:
    id: str
    name: str
    difficulty: str  # Beginner / Intermediate / Advanced
    category: str    # Upper Body / Lower Body / Core / Full Body
    target_muscles: Tuple[str, ...]
    duration: int    # minutes
    description: str
    instructions: Tuple[str, ...] = ()
    key_points: Tuple[str, ...] = ()
    common_mistakes: Tuple[str, ...] = ()


EXERCISES: Tuple[Exercise, ...] = (
    Exercise(
        id="squat",
        name="Squat",
        difficulty="Beginner",
        category="Lower Body",
        target_muscles=("Quadriceps", "Glutes", "Hamstrings"),
        duration=3,
        description="A fundamental lower body exercise that builds strength in your legs and core.",
        instructions=(
            "Stand with feet shoulder-width apart",
            "Lower your body by bending knees and hips",
            "Keep chest up and back straight",
            "Push through heels to return to start",
        ),
        key_points=(
            "Keep knees aligned with toes",
            "Maintain neutral spine throughout",
            "Go as low as comfortable with good form",
        ),
        common_mistakes=("Knees caving inward", "Rounding the lower back", "Lifting heels off the ground"),
    ),
    Exercise(
        id="push-up",
        name="Push-Up",
        difficulty="Beginner",
        category="Upper Body",
        target_muscles=("Chest", "Triceps", "Shoulders"),
        duration=2,
        description="Classic bodyweight exercise for building upper body and core strength.",
        instructions=(
            "Start in plank position with hands shoulder-width",
            "Lower body until chest nearly touches floor",
            "Keep core engaged and body straight",
            "Push back up to starting position",
        ),
        key_points=(
            "Maintain straight line from head to heels",
            "Elbows at 45-degree angle to body",
            "Controlled movement up and down",
        ),
        common_mistakes=("Sagging hips", "Flaring elbows too wide", "Not going low enough"),
    ),
    Exercise(
        id="plank",
        name="Plank",
        difficulty="Beginner",
        category="Core",
        target_muscles=("Core", "Shoulders", "Back"),
        duration=1,
        description="Isometric core exercise that builds stability and endurance.",
        instructions=(
            "Get into forearm plank position",
            "Keep body in straight line",
            "Engage core and squeeze glutes",
            "Hold position without sagging",
        ),
        key_points=(
            "Don't let hips sag or pike up",
            "Keep neck neutral, don't look up",
            "Breathe steadily throughout",
        ),
        common_mistakes=("Hips too high or too low", "Holding breath", "Shoulders not over elbows"),
    ),
    Exercise(
        id="lunge",
        name="Lunge",
        difficulty="Intermediate",
        category="Lower Body",
        target_muscles=("Quadriceps", "Glutes", "Hamstrings"),
        duration=3,
        description="Unilateral leg exercise that improves balance and strength.",
        instructions=(
            "Step forward with one leg",
            "Lower hips until both knees at 90 degrees",
            "Keep front knee over ankle",
            "Push back to starting position",
        ),
        key_points=(
            "Keep torso upright throughout",
            "Don't let front knee pass toes",
            "Back knee hovers just above ground",
        ),
        common_mistakes=("Leaning too far forward", "Front knee extending past toes", "Not lowering back knee enough"),
    ),
    Exercise(
        id="burpee",
        name="Burpee",
        difficulty="Advanced",
        category="Full Body",
        target_muscles=("Full Body", "Cardio"),
        duration=4,
        description="High-intensity full body exercise combining strength and cardio.",
        instructions=(
            "Start standing, then drop into squat",
            "Place hands on ground and jump feet back",
            "Perform a push-up",
            "Jump feet forward and explode up with jump",
        ),
        key_points=(
            "Maintain form throughout each rep",
            "Control the landing",
            "Keep core engaged during push-up",
        ),
        common_mistakes=("Skipping the push-up", "Not fully extending during jump", "Landing too hard"),
    ),
    Exercise(
        id="deadlift",
        name="Deadlift",
        difficulty="Intermediate",
        category="Full Body",
        target_muscles=("Back", "Glutes", "Hamstrings"),
        duration=4,
        description="Compound movement building posterior chain strength.",
        instructions=(
            "Stand with feet hip-width apart",
            "Hinge at hips, keep back straight",
            "Lower hands toward floor",
            "Drive through heels to stand up",
        ),
        key_points=(
            "Keep bar/weight close to body",
            "Neutral spine throughout movement",
            "Engage lats and core",
        ),
        common_mistakes=("Rounding the back", "Starting with hips too low", "Not using legs enough"),
    ),
)

_EXERCISES_BY_ID: Dict[str, Exercise] = {exercise.id: exercise for exercise in EXERCISES}


def get_exercise(exercise_id: str) -> Optional[Exercise]:
    """Look up an exercise by id; case-insensitive, "pushup" resolves to "push-up"."""
    key = normalize_exercise_id(exercise_id)
    return _EXERCISES_BY_ID.get(EXERCISE_ALIASES.get(key, key))


def exercise_ids() -> List[str]:
    return [exercise.id for exercise in EXERCISES]


def exercise_name(exercise_id: str) -> str:
    """Display name for an exercise id, or a title-cased id when it is not catalogued."""
    exercise = get_exercise(exercise_id)
    if exercise is not None:
        return exercise.name
    return normalize_exercise_id(exercise_id).replace("_", " ").title()
