"""
Day registry.

All configured training days are registered here.  Use find_day() where a
missing day is a recoverable configuration gap (validation, filling) and
get_day() where the caller needs a day to proceed (CLI).
"""

from __future__ import annotations

from .base import DayDefinition

_DAY_REGISTRY: dict[str, DayDefinition] | None = None


def _registry() -> dict[str, DayDefinition]:
    global _DAY_REGISTRY
    if _DAY_REGISTRY is None:
        from .loader import load_days_from_yaml

        _DAY_REGISTRY = load_days_from_yaml()
    return _DAY_REGISTRY


def day_keys() -> list[str]:
    """All configured day keys, sorted."""
    return sorted(_registry())


def find_day(day_key: str) -> DayDefinition | None:
    """Return the DayDefinition for day_key, or None if not configured."""
    return _registry().get(day_key)


def get_day(day_key: str) -> DayDefinition:
    """
    Return the DayDefinition for the given day_key.

    Raises:
        ValueError: If day_key is not configured
    """
    day = find_day(day_key)
    if day is None:
        valid = ", ".join(day_keys()) or "(none)"
        raise ValueError(f"Unknown day '{day_key}'. Valid days: {valid}")
    return day
