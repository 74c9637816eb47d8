"""
Minute-estimation model.

Base minutes drive every trim/fill decision.  Display minutes add a
rounded-up buffer for the user's benefit only; nothing in the planning
engine may read them.

Per exercise:

    total_sets = work_sets + (1 if warmup else 0)
    minutes    = total_sets * set_minutes
               + max(0, total_sets - 1) * rest_minutes(class)
               + transition_minutes
"""

import math

from .catalog import ExerciseCatalog
from .classification import rest_seconds
from .config import DEFAULT_TIMING, TimingConfig
from .models import ExerciseEntry, Workout
from .weights import warmup_for


def total_sets_for_time(exercise: ExerciseEntry, timing: TimingConfig = DEFAULT_TIMING) -> int:
    """Work sets plus the derived warmup set, if any."""
    warm = warmup_for(exercise, timing)
    return len(exercise.sets) + (1 if warm is not None else 0)


def estimate_exercise_minutes(
    exercise: ExerciseEntry,
    timing: TimingConfig = DEFAULT_TIMING,
    catalog: ExerciseCatalog | None = None,
) -> float:
    """
    Estimate elapsed minutes for one exercise.

    Args:
        exercise: Exercise with its work sets
        timing: Time-model parameters
        catalog: Catalog used for classification (default: global catalog)

    Returns:
        Base minutes (no display buffer)
    """
    total_sets = total_sets_for_time(exercise, timing)
    rest_min = rest_seconds(exercise, timing, catalog) / 60

    work = total_sets * timing.set_minutes
    rest = max(0, total_sets - 1) * rest_min
    return work + rest + timing.transition_minutes


def estimate_workout_minutes(
    workout: Workout,
    timing: TimingConfig = DEFAULT_TIMING,
    catalog: ExerciseCatalog | None = None,
) -> float:
    """Sum of per-exercise base minutes."""
    return sum(estimate_exercise_minutes(ex, timing, catalog) for ex in workout.exercises)


def display_buffer_minutes(target_minutes: float, timing: TimingConfig = DEFAULT_TIMING) -> int:
    """Whole-minute display padding for a target; 0 when no target was given."""
    if target_minutes <= 0:
        return 0
    return math.ceil(target_minutes * timing.display_buffer_fraction)


def display_minutes(
    workout: Workout,
    target_minutes: float,
    timing: TimingConfig = DEFAULT_TIMING,
    catalog: ExerciseCatalog | None = None,
) -> float:
    """Base estimate plus display buffer.  For output only."""
    return estimate_workout_minutes(workout, timing, catalog) + display_buffer_minutes(
        target_minutes, timing
    )
