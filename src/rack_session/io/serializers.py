"""
JSON serialization for session records.

Handles conversion between dataclasses and JSON-compatible dicts.
"""

import json
import math
from datetime import datetime
from typing import Any

from ..core.models import LoggedExercise, SessionRecord


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_timestamp(value: str) -> str:
    """
    Validate an ISO 8601 timestamp.

    Args:
        value: Timestamp string, e.g. "2026-10-17T18:05:00+02:00"

    Returns:
        The timestamp unchanged

    Raises:
        ValidationError: If the string is not ISO 8601
    """
    if not isinstance(value, str):
        raise ValidationError(f"Invalid timestamp: {value!r}")
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValidationError(f"Invalid timestamp: {value}") from e
    return value


def validate_weight(value: Any, name: str) -> float:
    """
    Validate a logged weight.

    Raises:
        ValidationError: If the value is not a finite, non-negative number
    """
    try:
        w = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(w) or w < 0:
        raise ValidationError(f"{name} must be a finite non-negative number, got {value}")
    return w


def logged_exercise_to_dict(ex: LoggedExercise) -> dict[str, Any]:
    """Convert LoggedExercise to a JSON-compatible dict."""
    return {
        "exerciseKey": ex.exercise_key,
        "sets": ex.sets_count,
        "weights": list(ex.weights),
    }


def dict_to_logged_exercise(data: dict[str, Any]) -> LoggedExercise:
    """
    Convert dict to LoggedExercise.

    ``sets`` defaults to the number of weights when absent.

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Exercise entry must be an object, got {type(data).__name__}")
    key = data.get("exerciseKey")
    if not isinstance(key, str) or not key:
        raise ValidationError("exerciseKey must be a non-empty string")

    raw_weights = data.get("weights") or []
    if not isinstance(raw_weights, list):
        raise ValidationError(f"weights for {key} must be a list")
    weights = [validate_weight(w, f"weights[{i}] for {key}") for i, w in enumerate(raw_weights)]

    sets = data.get("sets", len(weights))
    try:
        sets_count = int(sets)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"sets for {key} must be an integer, got {sets!r}") from e
    if sets_count < 0:
        raise ValidationError(f"sets for {key} must be non-negative, got {sets_count}")

    return LoggedExercise(exercise_key=key, sets_count=sets_count, weights=weights)


def session_record_to_dict(record: SessionRecord) -> dict[str, Any]:
    """Convert SessionRecord to a JSON-compatible dict."""
    return {
        "createdAt": record.created_at,
        "dayKey": record.day_key,
        "title": record.title,
        "exercises": [logged_exercise_to_dict(ex) for ex in record.exercises],
    }


def dict_to_session_record(data: dict[str, Any]) -> SessionRecord:
    """
    Convert dict to SessionRecord.

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Session record must be an object")
    try:
        created_at = validate_timestamp(data["createdAt"])
        day_key = str(data["dayKey"])
    except KeyError as e:
        raise ValidationError(f"Session record missing field: {e.args[0]}") from e

    exercises = data.get("exercises") or []
    if not isinstance(exercises, list):
        raise ValidationError("exercises must be a list")

    return SessionRecord(
        created_at=created_at,
        day_key=day_key,
        title=str(data.get("title", "")),
        exercises=[dict_to_logged_exercise(ex) for ex in exercises],
    )


def session_to_json_line(record: SessionRecord) -> str:
    """Serialize a record to one compact JSONL line (no trailing newline)."""
    return json.dumps(session_record_to_dict(record), ensure_ascii=False, separators=(",", ":"))
