"""
YAML → DayDefinition loader.

Loads day definitions from individual YAML files in the bundled
``src/rack_session/days/`` directory.  Each file (e.g. day1.yaml) holds one
day's rule, priority table, fill candidates and baseline workout.

User overrides: place matching files in ``~/.rack-session/days/``.  A user
file is deep-merged over the bundled definition, so only changed keys need
to be listed (lists such as ``fill_candidates`` are replaced wholesale).  A
user file with no bundled counterpart is loaded as a new day.
"""

from __future__ import annotations

import warnings
from pathlib import Path

from ..engine.config_loader import deep_merge, get_package_root, get_user_config_dir, load_yaml_file
from ..models import ExerciseEntry, SetSpec, Workout
from .base import DayDefinition, DayRule

_REQUIRED_DAY_FIELDS: frozenset[str] = frozenset({"label", "allow_any_of"})


def _sets_from_list(raw: list, where: str) -> list[SetSpec]:
    if not isinstance(raw, list):
        raise ValueError(f"{where}: 'sets' must be a list")
    sets: list[SetSpec] = []
    for s in raw:
        if not isinstance(s, dict) or "reps" not in s:
            raise ValueError(f"{where}: each set needs 'reps'")
        sets.append(SetSpec(reps=int(s["reps"]), kg=float(s.get("kg", 0.0))))
    return sets


def exercise_from_dict(d: dict, where: str = "exercise") -> ExerciseEntry:
    """Convert a raw dict to an ExerciseEntry, raising ValueError if malformed."""
    if not isinstance(d, dict) or not d.get("name"):
        raise ValueError(f"{where}: missing 'name'")
    return ExerciseEntry(
        name=str(d["name"]),
        sets=_sets_from_list(d.get("sets", []), where),
        exercise_key=d.get("exercise_key"),
    )


def workout_from_dict(d: dict) -> Workout:
    """Convert a raw baseline dict to a Workout."""
    if not isinstance(d, dict):
        raise ValueError("baseline must be a mapping")
    return Workout(
        title=str(d.get("title", "")),
        exercises=[
            exercise_from_dict(ex, f"baseline exercise #{i}")
            for i, ex in enumerate(d.get("exercises") or [], 1)
        ],
    )


def day_from_dict(day_key: str, d: dict) -> DayDefinition:
    """Convert a raw dict (from YAML) to a DayDefinition.

    Raises ValueError if any required field is absent or malformed.
    """
    missing = _REQUIRED_DAY_FIELDS - set(d)
    if missing:
        raise ValueError(f"DayDefinition missing fields: {sorted(missing)}")

    rule = DayRule(
        label=str(d["label"]),
        allow_any_of=frozenset(str(t) for t in d["allow_any_of"] or ()),
        disallow_any_of=frozenset(str(t) for t in d.get("disallow_any_of") or ()),
    )
    priorities = {str(k): int(v) for k, v in (d.get("priorities") or {}).items()}
    candidates = tuple(
        exercise_from_dict(c, f"fill candidate #{i}")
        for i, c in enumerate(d.get("fill_candidates") or [], 1)
    )
    baseline = workout_from_dict(d["baseline"]) if d.get("baseline") else None

    return DayDefinition(
        day_key=str(d.get("day_key", day_key)),
        rule=rule,
        priorities=priorities,
        fill_candidates=candidates,
        baseline=baseline,
    )


def _get_bundled_days_dir() -> Path | None:
    candidate = get_package_root() / "days"
    return candidate if candidate.is_dir() else None


def _get_user_days_dir() -> Path | None:
    p = get_user_config_dir() / "days"
    return p if p.is_dir() else None


def load_days_from_yaml() -> dict[str, DayDefinition]:
    """Return {day_key: DayDefinition} loaded from per-day YAML files.

    Bundled files are merged with same-named user files; user-only files
    are added as new days.  Files that fail to parse or validate are
    skipped with a warning.
    """
    bundled_dir = _get_bundled_days_dir()
    user_dir = _get_user_days_dir()

    stems: dict[str, list[Path]] = {}
    for directory in (bundled_dir, user_dir):
        if directory is None:
            continue
        for p in sorted(directory.glob("*.yaml")):
            stems.setdefault(p.stem, []).append(p)

    result: dict[str, DayDefinition] = {}
    for stem, paths in stems.items():
        raw: dict = {}
        for p in paths:
            raw = deep_merge(raw, load_yaml_file(p))
        if not raw:
            continue
        try:
            day = day_from_dict(stem, raw)
        except (ValueError, TypeError) as exc:
            warnings.warn(f"rack-session: skipping day '{stem}': {exc}", stacklevel=2)
            continue
        result[day.day_key] = day
    return result
