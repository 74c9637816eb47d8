"""
Day definitions for rack-session.

Each training day bundles its tag rule, trim priority table, fill-candidate
list, and baseline workout template.
"""

from .base import DayDefinition, DayRule
from .registry import day_keys, find_day, get_day

__all__ = [
    "DayDefinition",
    "DayRule",
    "day_keys",
    "find_day",
    "get_day",
]
