"""
Compound / isolation classification.

The class of an exercise decides its rest interval, its minimum set count
during trimming, and whether it counts toward the "at least one compound
remains" rule.  Classification is a pure function of the resolved catalog
key and tags.
"""

from typing import Final, Literal

from .catalog import ExerciseCatalog, get_catalog
from .config import (
    DEFAULT_TIMING,
    MIN_SETS_COMPOUND,
    MIN_SETS_ISOLATION,
    TimingConfig,
)
from .models import ExerciseEntry

ExerciseClass = Literal["compound", "isolation"]

# Known isolation movements whose tags alone would read as compound.
ISOLATION_KEYS: Final[frozenset[str]] = frozenset(
    {
        "lateral_raises",
        "face_pulls",
        "triceps_pushdown",
        "skull_crushers",
        "biceps_curls",
        "hammer_curls",
        "calf_raises",
        "plank",
        "ab_wheel",
    }
)

_COMPOUND_TAGS: Final[frozenset[str]] = frozenset({"push", "pull", "legs"})


def exercise_ref(exercise: ExerciseEntry | str) -> str:
    """Best catalog reference for an exercise: its resolved key, else its name."""
    if isinstance(exercise, ExerciseEntry):
        return exercise.exercise_key or exercise.name
    return exercise


def classify(
    exercise: ExerciseEntry | str,
    catalog: ExerciseCatalog | None = None,
) -> ExerciseClass:
    """
    Classify an exercise as compound or isolation.

    Order of precedence:
    1. Explicit isolation key set
    2. Tags: "core" without "legs" → isolation; push/pull/legs → compound
    3. Default (including names the catalog does not know) → compound
    """
    catalog = catalog or get_catalog()
    key = catalog.resolve(exercise_ref(exercise))
    if key is None:
        return "compound"
    if key in ISOLATION_KEYS:
        return "isolation"

    tags = catalog.tags(key) or frozenset()
    if "core" in tags and "legs" not in tags:
        return "isolation"
    if tags & _COMPOUND_TAGS:
        return "compound"
    return "compound"


def is_compound(exercise: ExerciseEntry | str, catalog: ExerciseCatalog | None = None) -> bool:
    return classify(exercise, catalog) == "compound"


def min_sets(exercise: ExerciseEntry | str, catalog: ExerciseCatalog | None = None) -> int:
    """Set floor for trimming: compound keeps 2 sets, isolation keeps 1."""
    return MIN_SETS_COMPOUND if is_compound(exercise, catalog) else MIN_SETS_ISOLATION


def rest_seconds(
    exercise: ExerciseEntry | str,
    timing: TimingConfig = DEFAULT_TIMING,
    catalog: ExerciseCatalog | None = None,
) -> int:
    """Rest between sets for the exercise's class."""
    if is_compound(exercise, catalog):
        return timing.rest_compound_seconds
    return timing.rest_isolation_seconds
