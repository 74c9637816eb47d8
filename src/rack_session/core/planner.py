"""
Today's plan for a day and a time budget.

Runs the planning pipeline in a fixed order:

    validate (day rule) → trim (over budget) → fill (clearly under budget)

Every stage works on its own copy, so the day's baseline template is never
modified.  All control decisions use base minutes; display minutes are
computed for the caller's output only.
"""

from dataclasses import dataclass, field

from .catalog import ExerciseCatalog, get_catalog
from .config import DEFAULT_SETTINGS, Settings
from .days import get_day
from .filler import fill_to_time, timing_for_fill
from .models import Workout
from .time_model import display_buffer_minutes, estimate_workout_minutes
from .trimmer import trim_to_target
from .validator import validate_workout

TODAY_SUFFIX = "(today)"


@dataclass
class TodayPlan:
    """Everything the CLI needs to show and run today's session."""

    day_key: str
    target_minutes: float
    baseline: Workout             # validated baseline (untrimmed)
    plan: Workout                 # what will actually be run
    warnings: list[str] = field(default_factory=list)
    trim_notes: list[str] = field(default_factory=list)
    fill_notes: list[str] = field(default_factory=list)
    baseline_minutes: float = 0.0
    plan_minutes: float = 0.0
    target_reached: bool = True
    buffer_minutes: int = 0

    @property
    def has_target(self) -> bool:
        return self.target_minutes > 0


def build_today_plan(
    day_key: str,
    target_minutes: float,
    baseline: Workout | None = None,
    settings: Settings = DEFAULT_SETTINGS,
    catalog: ExerciseCatalog | None = None,
) -> TodayPlan:
    """
    Build today's plan from the day's baseline and a time budget.

    Args:
        day_key: Configured day identifier
        target_minutes: Time budget; <= 0 means "no limit" (no trim, no fill)
        baseline: Optional template override (default: the day's baseline)
        settings: Tunables (time model, fill fractions, tolerance)
        catalog: Catalog override (default: global catalog)

    Returns:
        TodayPlan

    Raises:
        ValueError: If day_key is unknown or the day has no baseline
    """
    catalog = catalog or get_catalog()
    day = get_day(day_key)
    template = baseline if baseline is not None else day.baseline
    if template is None:
        raise ValueError(f"No baseline workout configured for {day_key}")

    validated = validate_workout(day_key, template, catalog)
    timing = settings.timing
    baseline_minutes = estimate_workout_minutes(validated.workout, timing, catalog)

    plan = validated.workout.copy()
    plan.title = f"{day.label} {TODAY_SUFFIX}"

    trim_notes: list[str] = []
    fill_notes: list[str] = []
    target_reached = True

    if target_minutes > 0:
        trimmed = trim_to_target(
            day_key,
            plan,
            target_minutes,
            timing=timing,
            tolerance=settings.fit_tolerance_minutes,
            max_iterations=settings.trim_max_iterations,
            catalog=catalog,
        )
        plan = trimmed.plan
        trim_notes = trimmed.notes
        target_reached = trimmed.reached_target
        if trimmed.hit_iteration_cap:
            trim_notes.append(
                f"Target not reached: trimming stopped after "
                f"{settings.trim_max_iterations} steps at {trimmed.minutes:.1f} min "
                f"(target {target_minutes:g} min)."
            )
        elif not target_reached:
            trim_notes.append(
                f"Target not reachable: {trimmed.minutes:.1f} min is the shortest "
                f"legal version of this day (target {target_minutes:g} min)."
            )

        fill_timing = timing_for_fill(settings.fill, timing)
        if estimate_workout_minutes(plan, fill_timing, catalog) < target_minutes * settings.fill.aim_fraction:
            filled = fill_to_time(
                day_key,
                plan,
                target_minutes,
                config=settings.fill,
                timing=timing,
                catalog=catalog,
            )
            plan = filled.workout
            fill_notes = filled.notes

    return TodayPlan(
        day_key=day_key,
        target_minutes=target_minutes,
        baseline=validated.workout,
        plan=plan,
        warnings=validated.warnings,
        trim_notes=trim_notes,
        fill_notes=fill_notes,
        baseline_minutes=baseline_minutes,
        plan_minutes=estimate_workout_minutes(plan, timing, catalog),
        target_reached=target_reached,
        buffer_minutes=display_buffer_minutes(target_minutes, timing),
    )
