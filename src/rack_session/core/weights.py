"""
Weight rounding and warmup derivation.

Rounding uses round-half-away-from-zero on the quotient, so 1.25 kg with a
2.5 kg increment rounds up to 2.5 kg rather than to the even neighbour.
"""

import math

from .config import (
    DEFAULT_TIMING,
    DEFAULT_WEIGHT_INCREMENT,
    DUMBBELL_WEIGHT_INCREMENT,
    TimingConfig,
)
from .models import ExerciseEntry, SetSpec

# Time-based exercises: sets hold seconds, not kilograms, and get no warmup.
TIMED_EXERCISES: frozenset[str] = frozenset({"plank"})


def round_to_increment(x: float, increment: float = DEFAULT_WEIGHT_INCREMENT) -> float | None:
    """
    Round x to the nearest multiple of increment.

    Args:
        x: Raw weight in kg
        increment: Plate/dumbbell step (default 2.5)

    Returns:
        Rounded weight, or None if x is not a finite number

    Raises:
        ValueError: If increment is not positive
    """
    if increment <= 0:
        raise ValueError("increment must be positive")
    try:
        value = float(x)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None

    quotient = value / increment
    steps = math.floor(abs(quotient) + 0.5)
    return math.copysign(steps * increment, quotient) if steps else 0.0


def guess_increment(exercise_name: str) -> float:
    """Dumbbells usually move in 1 kg steps; everything else in 2.5 kg."""
    s = str(exercise_name or "").lower()
    if "dumbbell" in s or "db" in s:
        return DUMBBELL_WEIGHT_INCREMENT
    return DEFAULT_WEIGHT_INCREMENT


def is_timed(exercise: ExerciseEntry) -> bool:
    """True for hold-for-time exercises such as the plank."""
    return exercise.name.strip().lower() in TIMED_EXERCISES or (
        exercise.exercise_key in TIMED_EXERCISES
    )


def warmup_for(exercise: ExerciseEntry, timing: TimingConfig = DEFAULT_TIMING) -> SetSpec | None:
    """
    Derive the warmup set from the first work set, or None.

    Bodyweight-only first sets (kg == 0) and timed exercises get no warmup.
    """
    if not timing.warmup_enabled:
        return None
    if is_timed(exercise):
        return None
    if not exercise.sets:
        return None

    first_kg = exercise.sets[0].kg
    if not math.isfinite(first_kg) or first_kg <= 0:
        return None

    raw = first_kg * timing.warmup_fraction
    warm_kg = round_to_increment(raw, guess_increment(exercise.name))
    return SetSpec(reps=timing.warmup_reps, kg=warm_kg if warm_kg is not None else max(0.0, raw))
