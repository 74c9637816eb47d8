"""
Base types for the exercise catalog.

CatalogEntry describes one canonical exercise.  Found / NotFound form the
tagged result of a name lookup, so "unknown" is never conflated with an
empty-but-valid value.
"""

import re
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CatalogEntry:
    """One canonical exercise."""

    key: str                  # e.g. "bench_press"
    label: str                # e.g. "Bench press"
    tags: tuple[str, ...]     # ordered for display, e.g. ("push", "chest")
    aliases: tuple[str, ...] = field(default_factory=tuple)

    @property
    def tag_set(self) -> frozenset[str]:
        return frozenset(self.tags)


@dataclass(frozen=True)
class Found:
    """Successful lookup."""

    key: str


@dataclass(frozen=True)
class NotFound:
    """Unsuccessful lookup."""

    key: None = None


NOT_FOUND = NotFound()

_WS = re.compile(r"\s+")


def normalize_name(value: object) -> str:
    """
    Normalize a name for alias matching.

    Trims, lower-cases, collapses whitespace, and folds typographic
    apostrophes.  Accepts any input (non-strings are stringified, None is "").
    """
    if value is None:
        return ""
    s = str(value).strip().lower()
    s = _WS.sub(" ", s)
    return s.replace("’", "'")
