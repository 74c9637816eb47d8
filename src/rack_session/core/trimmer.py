"""
Priority-ranked trimming.

Shrinks an over-budget workout one step at a time:

1. Remove one trailing set from the lowest-priority exercise still above its
   set floor (compound 2, isolation 1).
2. Otherwise remove the lowest-priority exercise whose removal keeps at
   least two exercises and at least one compound.
3. Otherwise stop: the plan is at its minimum legal footprint.

Ties in priority resolve by position in the workout (stable sort), so the
result depends only on the input order, never on object identity.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from .catalog import ExerciseCatalog, get_catalog
from .classification import exercise_ref, is_compound, min_sets
from .config import (
    DEFAULT_PRIORITY,
    DEFAULT_TIMING,
    FIT_TOLERANCE_MINUTES,
    MIN_EXERCISES,
    TRIM_MAX_ITERATIONS,
    TimingConfig,
)
from .days import find_day
from .models import Workout
from .time_model import estimate_workout_minutes


@dataclass
class TrimResult:
    """
    Outcome of trim_to_target().

    ``reached_target`` is False when the loop stopped at the minimum legal
    footprint (or the iteration cap) while still over target + tolerance.
    ``hit_iteration_cap`` tells the two apart: the plan is only known to be
    minimal when the loop stopped on its own.
    """

    plan: Workout
    notes: list[str] = field(default_factory=list)
    reached_target: bool = True
    minutes: float = 0.0
    hit_iteration_cap: bool = False


def _priority_table(day_key: str, priorities: Mapping[str, int] | None) -> Mapping[str, int]:
    if priorities is not None:
        return priorities
    day = find_day(day_key)
    return day.priorities if day is not None else {}


def priority_of(
    day_key: str,
    exercise_name: str,
    catalog: ExerciseCatalog | None = None,
    priorities: Mapping[str, int] | None = None,
) -> int:
    """Trim priority of an exercise on a day; higher is kept longer."""
    catalog = catalog or get_catalog()
    key = catalog.resolve(exercise_name)
    table = _priority_table(day_key, priorities)
    if key is not None and key in table:
        return table[key]
    return DEFAULT_PRIORITY


def rank_low_priority_first(
    day_key: str,
    workout: Workout,
    catalog: ExerciseCatalog | None = None,
    priorities: Mapping[str, int] | None = None,
) -> list[int]:
    """Exercise indices sorted by ascending priority; ties keep workout order."""
    prios = [
        priority_of(day_key, exercise_ref(ex), catalog, priorities) for ex in workout.exercises
    ]
    return sorted(range(len(prios)), key=lambda i: prios[i])


def can_remove_exercise(
    workout: Workout,
    idx: int,
    catalog: ExerciseCatalog | None = None,
) -> bool:
    """
    Return True if removing exercise idx keeps the workout legal.

    Legal means at least MIN_EXERCISES exercises and at least one compound.
    """
    if len(workout.exercises) <= MIN_EXERCISES:
        return False
    remaining = [ex for i, ex in enumerate(workout.exercises) if i != idx]
    return any(is_compound(ex, catalog) for ex in remaining)


def trim_to_target(
    day_key: str,
    workout: Workout,
    target_minutes: float,
    timing: TimingConfig = DEFAULT_TIMING,
    tolerance: float = FIT_TOLERANCE_MINUTES,
    max_iterations: int = TRIM_MAX_ITERATIONS,
    catalog: ExerciseCatalog | None = None,
    priorities: Mapping[str, int] | None = None,
) -> TrimResult:
    """
    Reduce a workout until its base estimate fits target + tolerance.

    The input workout is not modified; the result holds a deep copy.

    Args:
        day_key: Day identifier used for the priority table
        workout: Workout to trim
        target_minutes: Time budget in minutes
        timing: Time-model parameters
        tolerance: Minutes allowed above target before trimming stops
        max_iterations: Hard cap on loop iterations
        catalog: Catalog for resolution/classification
        priorities: Optional key → priority override for the day

    Returns:
        TrimResult with the trimmed plan, one note per reduction, and
        whether the target was reached.
    """
    catalog = catalog or get_catalog()
    plan = workout.copy()
    notes: list[str] = []
    limit = target_minutes + tolerance
    hit_cap = False

    for _ in range(max_iterations):
        if estimate_workout_minutes(plan, timing, catalog) <= limit:
            break

        ranked = rank_low_priority_first(day_key, plan, catalog, priorities)

        # 1) drop one set from the lowest-priority exercise above its floor
        reducible = next(
            (i for i in ranked if len(plan.exercises[i].sets) > min_sets(plan.exercises[i], catalog)),
            None,
        )
        if reducible is not None:
            ex = plan.exercises[reducible]
            ex.sets.pop()
            notes.append(f"Trim: -1 set on '{catalog.display_name(ex.name)}'.")
            continue

        # 2) drop the lowest-priority exercise that can legally go
        removable = next((i for i in ranked if can_remove_exercise(plan, i, catalog)), None)
        if removable is None:
            break

        ex = plan.exercises.pop(removable)
        notes.append(f"Trim: removed '{catalog.display_name(ex.name)}'.")
    else:
        hit_cap = estimate_workout_minutes(plan, timing, catalog) > limit

    minutes = estimate_workout_minutes(plan, timing, catalog)
    return TrimResult(
        plan=plan,
        notes=notes,
        reached_target=minutes <= limit,
        minutes=minutes,
        hit_iteration_cap=hit_cap,
    )
