"""
YAML → typed config loader.

Loads tunables from settings.yaml (bundled with the package) and optionally
merges user overrides from ~/.rack-session/settings.yaml.

Usage:
    from rack_session.core.engine.config_loader import load_settings
    settings = load_settings()
    settings.fill.aim_fraction

If the bundled YAML cannot be parsed, all lookups return the Python defaults
from config.py (no crash).  If the user override file has parse errors, a
warning is issued and the file is ignored.
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import (
    FIT_TOLERANCE_MINUTES,
    TRIM_MAX_ITERATIONS,
    FillConfig,
    RunnerSettings,
    Settings,
    TimingConfig,
)

# ---------------------------------------------------------------------------
# Shared helpers (also used by the catalog and day loaders)
# ---------------------------------------------------------------------------


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; return {} if it is missing or unreadable."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"rack-session: ignoring {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def get_package_root() -> Path:
    """Return src/rack_session/, where the bundled YAML files live."""
    # config_loader.py lives at src/rack_session/core/engine/config_loader.py
    return Path(__file__).parent.parent.parent


def get_user_config_dir() -> Path:
    """Return ~/.rack-session (may not exist)."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / ".rack-session"


def load_bundled_with_override(filename: str) -> dict[str, Any]:
    """
    Load a bundled YAML file and deep-merge the same-named user file over it.

    Load order (later overrides earlier):
    1. Bundled src/rack_session/<filename>
    2. User override at ~/.rack-session/<filename>
    """
    config: dict[str, Any] = {}

    bundled = get_package_root() / filename
    if bundled.exists():
        config = deep_merge(config, load_yaml_file(bundled))

    user = get_user_config_dir() / filename
    if user.exists():
        user_cfg = load_yaml_file(user)
        if user_cfg:
            config = deep_merge(config, user_cfg)

    return config


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_model_config() -> dict[str, Any]:
    """
    Load and merge settings.yaml from the bundled and user locations.

    Returns:
        Merged dict of config sections.  Empty dict if no YAML available.
    """
    return load_bundled_with_override("settings.yaml")


def _section(cfg: dict[str, Any], name: str) -> dict[str, Any]:
    value = cfg.get(name, {})
    return value if isinstance(value, dict) else {}


def settings_from_dict(cfg: dict[str, Any]) -> Settings:
    """
    Build typed Settings from a raw config dict.

    Unknown keys are ignored; missing keys keep their config.py defaults.
    An invalid value (e.g. a string where a number is expected) discards the
    whole section with a warning.
    """
    def build(cls, section: str):
        raw = _section(cfg, section)
        known = {k: v for k, v in raw.items() if k in cls.__dataclass_fields__}
        try:
            return cls(**known)
        except (TypeError, ValueError) as exc:
            warnings.warn(
                f"rack-session: invalid '{section}' settings ({exc}); using defaults.",
                stacklevel=3,
            )
            return cls()

    targeting = _section(cfg, "targeting")
    try:
        tolerance = float(targeting.get("fit_tolerance_minutes", FIT_TOLERANCE_MINUTES))
        max_iterations = int(targeting.get("trim_max_iterations", TRIM_MAX_ITERATIONS))
    except (TypeError, ValueError) as exc:
        warnings.warn(
            f"rack-session: invalid 'targeting' settings ({exc}); using defaults.",
            stacklevel=2,
        )
        tolerance, max_iterations = FIT_TOLERANCE_MINUTES, TRIM_MAX_ITERATIONS

    return Settings(
        timing=build(TimingConfig, "timing"),
        fill=build(FillConfig, "fill"),
        runner=build(RunnerSettings, "runner"),
        fit_tolerance_minutes=tolerance,
        trim_max_iterations=max_iterations,
    )


def load_settings() -> Settings:
    """Load bundled + user settings.yaml into a typed Settings object."""
    return settings_from_dict(load_model_config())
