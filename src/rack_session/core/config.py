"""
Configuration constants for the session time model and runner.

All adjustable parameters are centralized here for easy tuning.  The values
can be overridden per user through ~/.rack-session/settings.yaml (see
core/engine/config_loader.py); anything not overridden falls back to the
defaults below.
"""

import math
from dataclasses import dataclass
from typing import Final

# =============================================================================
# TIME MODEL
# =============================================================================

SET_MINUTES: Final[float] = 1.0  # Working time per set, warmup included
TRANSITION_MINUTES: Final[float] = 0.5  # Setup/changeover per exercise
REST_COMPOUND_SECONDS: Final[int] = 120
REST_ISOLATION_SECONDS: Final[int] = 60

# Display-only padding on top of the base estimate.  Never drives trim/fill.
DISPLAY_BUFFER_FRACTION: Final[float] = 0.12

# =============================================================================
# WARMUP (counts in time, never logged)
# =============================================================================

WARMUP_ENABLED: Final[bool] = True
WARMUP_REPS: Final[int] = 15
WARMUP_FRACTION: Final[float] = 0.50  # Fraction of the first work-set weight

# =============================================================================
# WEIGHT ROUNDING
# =============================================================================

DEFAULT_WEIGHT_INCREMENT: Final[float] = 2.5
DUMBBELL_WEIGHT_INCREMENT: Final[float] = 1.0

# =============================================================================
# TARGETING (Section 4.4 / 4.5)
# =============================================================================

AIM_FRACTION: Final[float] = 0.92  # Below target*aim: filling is attempted
CAP_FRACTION: Final[float] = 0.98  # No fill addition may exceed target*cap
FIT_TOLERANCE_MINUTES: Final[float] = 1.5  # Trim stops at target + tolerance
TRIM_MAX_ITERATIONS: Final[int] = 600

# =============================================================================
# TRIM PRIORITY AND SET FLOORS
# =============================================================================

DEFAULT_PRIORITY: Final[int] = 30  # Unmapped exercise keys: medium-low
MIN_SETS_COMPOUND: Final[int] = 2
MIN_SETS_ISOLATION: Final[int] = 1
MIN_EXERCISES: Final[int] = 2

# =============================================================================
# SESSION RUNNER
# =============================================================================

TRANSITION_SECONDS: Final[int] = 45  # Changeover between exercises (0 = off)
READY_COUNTDOWN_SECONDS: Final[int] = 10  # Countdown before the first set (0 = off)
TICK_SECONDS: Final[float] = 1.0

# remaining seconds -> number of bells
COUNTDOWN_CUES: Final[dict[int, int]] = {30: 1, 10: 2, 0: 3}

# Auto-fill is suppressed when history deviates from the plan by more than this
AUTOFILL_MAX_DEVIATION: Final[float] = 0.15


def _is_number(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


@dataclass(frozen=True)
class TimingConfig:
    """Parameters of the minute-estimation model."""

    set_minutes: float = SET_MINUTES
    transition_minutes: float = TRANSITION_MINUTES
    rest_compound_seconds: int = REST_COMPOUND_SECONDS
    rest_isolation_seconds: int = REST_ISOLATION_SECONDS
    warmup_enabled: bool = WARMUP_ENABLED
    warmup_reps: int = WARMUP_REPS
    warmup_fraction: float = WARMUP_FRACTION
    display_buffer_fraction: float = DISPLAY_BUFFER_FRACTION

    def __post_init__(self) -> None:
        if self.set_minutes < 0:
            raise ValueError("set_minutes must be non-negative")
        if self.transition_minutes < 0:
            raise ValueError("transition_minutes must be non-negative")
        if self.rest_isolation_seconds < 0:
            raise ValueError("rest_isolation_seconds must be non-negative")
        if self.rest_compound_seconds <= self.rest_isolation_seconds:
            raise ValueError("rest_compound_seconds must exceed rest_isolation_seconds")


@dataclass(frozen=True)
class FillConfig:
    """Parameters of the greedy fill pass."""

    per_set_minutes: float = SET_MINUTES
    transition_minutes: float = TRANSITION_MINUTES
    aim_fraction: float = AIM_FRACTION
    cap_fraction: float = CAP_FRACTION

    def __post_init__(self) -> None:
        if not 0 < self.aim_fraction <= self.cap_fraction:
            raise ValueError("Expected 0 < aim_fraction <= cap_fraction")


@dataclass(frozen=True)
class RunnerSettings:
    """Parameters of the interactive session runner."""

    transition_seconds: int = TRANSITION_SECONDS
    ready_countdown_seconds: int = READY_COUNTDOWN_SECONDS
    tick_seconds: float = TICK_SECONDS
    autofill_max_deviation: float = AUTOFILL_MAX_DEVIATION

    def __post_init__(self) -> None:
        for name in ("transition_seconds", "ready_countdown_seconds", "tick_seconds"):
            value = getattr(self, name)
            if not _is_number(value) or value < 0:
                raise ValueError(f"{name} must be a non-negative number")
        if not _is_number(self.autofill_max_deviation) or self.autofill_max_deviation <= 0:
            raise ValueError("autofill_max_deviation must be a positive number")


@dataclass(frozen=True)
class Settings:
    """All tunables for one run, as loaded from YAML over the defaults."""

    timing: TimingConfig = TimingConfig()
    fill: FillConfig = FillConfig()
    runner: RunnerSettings = RunnerSettings()
    fit_tolerance_minutes: float = FIT_TOLERANCE_MINUTES
    trim_max_iterations: int = TRIM_MAX_ITERATIONS


DEFAULT_TIMING: Final[TimingConfig] = TimingConfig()
DEFAULT_SETTINGS: Final[Settings] = Settings()
