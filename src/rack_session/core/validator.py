"""
Day-rule validation.

Keeps a day's exercises consistent with its movement pattern.  The strategy
is safe by default: exercises that contradict the day are dropped, unknown
exercises are kept so the catalog gap stays visible, and every decision is
reported as a warning.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from .catalog import ExerciseCatalog, get_catalog
from .days import DayRule, find_day
from .models import Workout

_TRAILING_PARENS = re.compile(r"\s*(\(.+\))\s*$")


@dataclass
class ValidationResult:
    """Filtered workout plus human-readable warnings."""

    workout: Workout
    warnings: list[str] = field(default_factory=list)


def _rule_for(day_key: str, rules: Mapping[str, DayRule] | None) -> DayRule | None:
    if rules is not None:
        return rules.get(day_key)
    day = find_day(day_key)
    return day.rule if day is not None else None


def rewrite_title(old_title: str | None, new_prefix: str) -> str:
    """
    Replace a title with the day label, keeping a trailing "(...)" suffix.

    >>> rewrite_title("Push (45 min version)", "Day 1")
    'Day 1 (45 min version)'
    """
    t = str(old_title or "").strip()
    if not t:
        return new_prefix
    m = _TRAILING_PARENS.search(t)
    suffix = f" {m.group(1)}" if m else ""
    return f"{new_prefix}{suffix}"


def can_add_to_day(
    day_key: str,
    exercise_name: str,
    catalog: ExerciseCatalog | None = None,
    rules: Mapping[str, DayRule] | None = None,
) -> bool:
    """
    Return True if the exercise may be added to the day.

    Days without a rule and exercises the catalog does not know are allowed.
    """
    rule = _rule_for(day_key, rules)
    if rule is None:
        return True
    catalog = catalog or get_catalog()
    tags = catalog.tags(exercise_name)
    if tags is None:
        return True
    return rule.admits(tags)


def validate_workout(
    day_key: str,
    workout: Workout,
    catalog: ExerciseCatalog | None = None,
    rules: Mapping[str, DayRule] | None = None,
) -> ValidationResult:
    """
    Filter a workout against the day's tag rule.

    Args:
        day_key: Day identifier, e.g. "day1"
        workout: Workout to validate (not modified)
        catalog: Catalog for name resolution (default: global catalog)
        rules: Optional day_key → DayRule table (default: configured days)

    Returns:
        ValidationResult with a new workout and warnings.  With no rule for
        the day, the input workout is returned as-is with one warning.
    """
    rule = _rule_for(day_key, rules)
    if rule is None:
        return ValidationResult(workout=workout, warnings=[f"No day rule found for {day_key}"])

    catalog = catalog or get_catalog()
    out = workout.copy()
    out.title = rewrite_title(workout.title, rule.label)

    warnings: list[str] = []
    kept = []
    for ex in out.exercises:
        found = catalog.lookup(ex.name)
        if found.key is None:
            warnings.append(
                f"Unknown exercise '{ex.name}'. Add it to the exercise catalog "
                "so it can be validated."
            )
            kept.append(ex)
            continue

        entry = catalog.entry(found.key)
        if not rule.admits(entry.tag_set):
            warnings.append(
                f"'{entry.label}' (tags: {', '.join(entry.tags)}) does not match "
                f"{rule.label}. Dropped from today's session."
            )
            continue

        ex.name = entry.label
        ex.exercise_key = entry.key
        kept.append(ex)

    out.exercises = kept
    return ValidationResult(workout=out, warnings=warnings)
