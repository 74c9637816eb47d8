"""
Data models for rack-session.

Core dataclasses for day templates, planned workouts, and logged sessions.
Warmup sets are never stored on a model; they are derived from the first
work set when estimating time and when running a session.
"""

import copy
from dataclasses import dataclass, field


@dataclass
class SetSpec:
    """
    A single prescribed work set.

    ``kg == 0`` means bodyweight.  For time-based exercises (plank) ``kg``
    holds the hold duration in seconds.
    """

    reps: int
    kg: float = 0.0

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.reps < 0:
            raise ValueError("reps must be non-negative")
        if not self.kg >= 0:  # also rejects NaN
            raise ValueError("kg must be non-negative")


@dataclass
class ExerciseEntry:
    """
    One exercise within a workout.

    ``sets`` is owned by this entry and mutated in place by the session
    runner's adjust command (suffix rewrite) and by trimming (tail removal).
    """

    name: str
    sets: list[SetSpec] = field(default_factory=list)
    exercise_key: str | None = None


@dataclass
class Workout:
    """An ordered list of exercises under a title."""

    title: str
    exercises: list[ExerciseEntry] = field(default_factory=list)

    def copy(self) -> "Workout":
        """Return a deep, independently owned copy."""
        return copy.deepcopy(self)


@dataclass
class LoggedExercise:
    """
    Per-exercise summary stored in a session record.

    Also the shape returned by the history lookup used for auto-fill.
    """

    exercise_key: str
    sets_count: int
    weights: list[float] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.sets_count < 0:
            raise ValueError("sets_count must be non-negative")

    @property
    def top_weight(self) -> float | None:
        """Last recorded weight, or None when no weights were logged."""
        return self.weights[-1] if self.weights else None


@dataclass
class SessionRecord:
    """
    A completed session as appended to the history log.

    Contains work sets only; warmup is never included.
    """

    created_at: str  # ISO 8601 timestamp
    day_key: str
    title: str
    exercises: list[LoggedExercise] = field(default_factory=list)

    def entry_for(self, exercise_key: str) -> LoggedExercise | None:
        """Return the logged entry for the given key, or None."""
        for ex in self.exercises:
            if ex.exercise_key == exercise_key:
                return ex
        return None
