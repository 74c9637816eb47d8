"""
YAML → CatalogEntry loader.

Loads the bundled ``src/rack_session/catalog.yaml`` and deep-merges
``~/.rack-session/catalog.yaml`` over it, so a user can add aliases or whole
new exercises without touching the package.

File layout::

    exercises:
      bench_press:
        label: Bench press
        tags: [push, chest, triceps]
        aliases: [Barbell bench press, Bænkpres]
"""

from __future__ import annotations

import warnings

from ..engine.config_loader import load_bundled_with_override
from .base import CatalogEntry


def entry_from_dict(key: str, d: dict) -> CatalogEntry:
    """Convert a raw dict (from YAML) to a CatalogEntry.

    Raises ValueError if the label or tags are missing.
    """
    if not isinstance(d, dict):
        raise ValueError("entry must be a mapping")
    if not d.get("label"):
        raise ValueError("missing 'label'")
    tags = d.get("tags")
    if not tags:
        raise ValueError("missing 'tags'")
    return CatalogEntry(
        key=str(key),
        label=str(d["label"]),
        tags=tuple(str(t) for t in tags),
        aliases=tuple(str(a) for a in d.get("aliases") or ()),
    )


def load_catalog_entries() -> dict[str, CatalogEntry]:
    """Return {key: CatalogEntry} from bundled + user catalog.yaml.

    Malformed entries are skipped with a warning; an empty dict is returned
    when no YAML is available.
    """
    raw = load_bundled_with_override("catalog.yaml").get("exercises") or {}
    if not isinstance(raw, dict):
        warnings.warn("rack-session: catalog 'exercises' must be a mapping", stacklevel=2)
        return {}

    result: dict[str, CatalogEntry] = {}
    for key, d in raw.items():
        try:
            result[str(key)] = entry_from_dict(key, d)
        except ValueError as exc:
            warnings.warn(
                f"rack-session: skipping catalog entry '{key}': {exc}",
                stacklevel=2,
            )
    return result
