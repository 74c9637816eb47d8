"""
Greedy bounded fill.

Appends the day's accessory candidates, in list order, while the workout is
below target * aim_fraction.  A candidate is accepted only if the simulated
total stays at or below target * cap_fraction, so no single addition can
push the session past the cap.
"""

import copy
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace

from .catalog import ExerciseCatalog, get_catalog
from .config import DEFAULT_TIMING, FillConfig, TimingConfig
from .days import DayRule, find_day
from .models import ExerciseEntry, Workout
from .time_model import estimate_exercise_minutes, estimate_workout_minutes
from .validator import can_add_to_day

NO_TIME_NOTE = "No time given -> no fill."


@dataclass
class FillResult:
    """Outcome of fill_to_time()."""

    workout: Workout
    notes: list[str] = field(default_factory=list)


def fill_candidates_for(day_key: str) -> tuple[ExerciseEntry, ...]:
    """Configured fill candidates for the day, in priority order."""
    day = find_day(day_key)
    return day.fill_candidates if day is not None else ()


def already_has_exercise(workout: Workout, name: str) -> bool:
    """Case-insensitive name match against the workout's exercises."""
    n = str(name or "").lower()
    return any(str(ex.name or "").lower() == n for ex in workout.exercises)


def timing_for_fill(config: FillConfig, timing: TimingConfig = DEFAULT_TIMING) -> TimingConfig:
    """Time model with the fill config's per-set and transition minutes."""
    return replace(
        timing,
        set_minutes=config.per_set_minutes,
        transition_minutes=config.transition_minutes,
    )


def fill_to_time(
    day_key: str,
    workout: Workout,
    target_minutes: float,
    config: FillConfig | None = None,
    timing: TimingConfig = DEFAULT_TIMING,
    catalog: ExerciseCatalog | None = None,
    candidates: Sequence[ExerciseEntry] | None = None,
    rules: Mapping[str, DayRule] | None = None,
) -> FillResult:
    """
    Fill a workout with allowed accessory exercises toward the time target.

    Args:
        day_key: Day identifier (candidate list and tag rule)
        workout: Workout to fill (not modified)
        target_minutes: Time budget; <= 0 disables filling
        config: Aim/cap fractions and per-set/transition minutes
        timing: Base time model; rest and warmup settings come from here
        catalog: Catalog for labels, tags and classification
        candidates: Optional candidate list override (default: day config)
        rules: Optional day_key → DayRule override

    Returns:
        FillResult.  With no target the input workout itself is returned
        with a single explanatory note.
    """
    if not target_minutes or target_minutes <= 0:
        return FillResult(workout=workout, notes=[NO_TIME_NOTE])

    config = config or FillConfig()
    catalog = catalog or get_catalog()
    model = timing_for_fill(config, timing)

    aim_min = target_minutes * config.aim_fraction
    cap_min = target_minutes * config.cap_fraction

    out = workout.copy()
    notes: list[str] = []
    current = estimate_workout_minutes(out, model, catalog)

    pool = candidates if candidates is not None else fill_candidates_for(day_key)
    for cand in pool:
        if current >= aim_min:
            break
        if already_has_exercise(out, cand.name):
            continue
        if not can_add_to_day(day_key, cand.name, catalog, rules):
            continue

        simulated = current + estimate_exercise_minutes(cand, model, catalog)
        if simulated <= cap_min:
            label = catalog.display_name(cand.name)
            added = copy.deepcopy(cand)
            added.name = label
            added.exercise_key = catalog.resolve(cand.name)
            out.exercises.append(added)
            current = simulated
            notes.append(f"Added '{label}' to fill the time budget.")

    return FillResult(workout=out, notes=notes)
