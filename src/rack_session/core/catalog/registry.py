"""
Exercise catalog registry.

Use get_catalog() for the process-wide catalog loaded from YAML.  Lookups
are total over arbitrary input: an unknown or malformed name resolves to
NOT_FOUND, never an exception.

If no catalog entries can be loaded at all, get_catalog() raises RuntimeError.
"""

from __future__ import annotations

from collections.abc import Iterable

from .base import NOT_FOUND, CatalogEntry, Found, NotFound, normalize_name


class ExerciseCatalog:
    """
    Two-stage name resolver over a set of CatalogEntry objects.

    Stage 1: exact key match (``"bench_press"``).
    Stage 2: normalized alias table (labels, aliases and keys, compared
    case- and whitespace-insensitively).
    """

    def __init__(self, entries: Iterable[CatalogEntry]):
        self._entries: dict[str, CatalogEntry] = {e.key: e for e in entries}
        self._alias_to_key: dict[str, str] = {}
        for entry in self._entries.values():
            self._alias_to_key[normalize_name(entry.label)] = entry.key
            for alias in entry.aliases:
                self._alias_to_key[normalize_name(alias)] = entry.key
            self._alias_to_key[normalize_name(entry.key)] = entry.key

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def lookup(self, name_or_key: object) -> Found | NotFound:
        """Resolve a name or key to Found(key) or NOT_FOUND."""
        if isinstance(name_or_key, str) and name_or_key in self._entries:
            return Found(name_or_key)
        key = self._alias_to_key.get(normalize_name(name_or_key))
        return Found(key) if key is not None else NOT_FOUND

    def resolve(self, name_or_key: object) -> str | None:
        """Return the canonical key for a name, or None if unknown."""
        return self.lookup(name_or_key).key

    def entry(self, name_or_key: object) -> CatalogEntry | None:
        key = self.resolve(name_or_key)
        return self._entries[key] if key is not None else None

    def tags(self, name_or_key: object) -> frozenset[str] | None:
        """Return the tag set for a name or key, or None if unknown."""
        entry = self.entry(name_or_key)
        return entry.tag_set if entry is not None else None

    def label(self, name_or_key: object) -> str | None:
        """Return the display label for a name or key, or None if unknown."""
        entry = self.entry(name_or_key)
        return entry.label if entry is not None else None

    def display_name(self, name: str) -> str:
        """Catalog label when known, otherwise the name as given."""
        return self.label(name) or name

    def entries(self) -> list[CatalogEntry]:
        """All entries sorted by key."""
        return [self._entries[k] for k in sorted(self._entries)]


def _build_catalog() -> ExerciseCatalog:
    from .loader import load_catalog_entries

    loaded = load_catalog_entries()
    if not loaded:
        raise RuntimeError(
            "rack-session: no exercise catalog could be loaded from YAML. "
            "Check that src/rack_session/catalog.yaml is present and valid."
        )
    return ExerciseCatalog(loaded.values())


_CATALOG: ExerciseCatalog | None = None


def get_catalog() -> ExerciseCatalog:
    """Return the process-wide catalog, loading it on first use."""
    global _CATALOG
    if _CATALOG is None:
        _CATALOG = _build_catalog()
    return _CATALOG
