"""
Base types for day definitions.

DayRule is the movement-pattern filter for one day.  DayDefinition adds the
configuration data the trimmer, filler and planner consume for that day.
"""

from dataclasses import dataclass, field

from ..config import DEFAULT_PRIORITY
from ..models import ExerciseEntry, Workout


@dataclass(frozen=True)
class DayRule:
    """Tag rule: keep an exercise iff it has any allowed tag and no disallowed tag."""

    label: str                         # e.g. "Day 1: Chest, Shoulders & Triceps"
    allow_any_of: frozenset[str]
    disallow_any_of: frozenset[str] = frozenset()

    def admits(self, tags: frozenset[str] | set[str]) -> bool:
        """Return True if the tag set satisfies this rule."""
        return bool(self.allow_any_of & tags) and not (self.disallow_any_of & tags)


@dataclass(frozen=True)
class DayDefinition:
    """
    Full configuration for one training day.

    ``priorities`` maps catalog keys to trim priority (higher = kept longer).
    ``fill_candidates`` is in priority order.  ``baseline`` is the template
    that each session starts from; callers must copy it before mutating.
    """

    day_key: str
    rule: DayRule
    priorities: dict[str, int] = field(default_factory=dict)
    fill_candidates: tuple[ExerciseEntry, ...] = ()
    baseline: Workout | None = None

    @property
    def label(self) -> str:
        return self.rule.label

    def priority_of(self, exercise_key: str | None) -> int:
        """Trim priority for a catalog key; unmapped or unknown keys get the default."""
        if exercise_key is None:
            return DEFAULT_PRIORITY
        return self.priorities.get(exercise_key, DEFAULT_PRIORITY)
