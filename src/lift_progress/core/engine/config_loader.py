"""
YAML → ProgressionRules loader.

Python defaults live in core/config.py. An optional user file at
~/.lift-progress/progression.yaml (or the path in $LIFT_PROGRESS_CONFIG)
overrides individual thresholds:

    high_consistency: 85
    weight_increment_compound: 2.0
    name_matching: normalized

Usage:
    from lift_progress.core.engine.config_loader import load_progression_rules
    rules = load_progression_rules()

If the override file cannot be parsed or holds unknown keys, a warning is
issued and the offending content is ignored (no crash).
"""

from __future__ import annotations

import dataclasses
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import DEFAULT_RULES, ProgressionRules

CONFIG_ENV_VAR = "LIFT_PROGRESS_CONFIG"


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML mapping; warn and return {} on parse errors."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"lift-progress: ignoring config {path} ({exc})", stacklevel=3)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        warnings.warn(f"lift-progress: ignoring config {path} (not a mapping)", stacklevel=3)
        return {}
    return data


def get_user_config_path() -> Path | None:
    """Return the override file path if it exists, else None."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path).expanduser()
        return p if p.exists() else None
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".lift-progress" / "progression.yaml"
    return p if p.exists() else None


def rules_from_dict(overrides: dict[str, Any], base: ProgressionRules = DEFAULT_RULES) -> ProgressionRules:
    """
    Apply overrides onto ``base``, coercing each value to the field's type.

    Unknown keys, values that do not coerce and non-positive numbers are
    skipped with a warning.
    """
    fields = {f.name: f for f in dataclasses.fields(ProgressionRules)}
    changes: dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in fields:
            warnings.warn(f"lift-progress: unknown config key {key!r}", stacklevel=2)
            continue
        current = getattr(base, key)
        try:
            coerced = type(current)(value)
        except (TypeError, ValueError):
            warnings.warn(
                f"lift-progress: invalid value for {key!r}: {value!r}", stacklevel=2
            )
            continue
        if isinstance(coerced, (int, float)) and coerced <= 0:
            warnings.warn(
                f"lift-progress: {key!r} must be positive, got {value!r}", stacklevel=2
            )
            continue
        changes[key] = coerced
    if changes.get("name_matching", base.name_matching) not in ("exact", "normalized"):
        warnings.warn(
            f"lift-progress: name_matching must be 'exact' or 'normalized', "
            f"got {changes['name_matching']!r}",
            stacklevel=2,
        )
        changes.pop("name_matching")
    return dataclasses.replace(base, **changes)


def load_progression_rules(path: Path | None = None) -> ProgressionRules:
    """
    Load rules: Python defaults, then the user override file if present.

    Args:
        path: Explicit override file; defaults to get_user_config_path()

    Returns:
        ProgressionRules
    """
    if path is None:
        path = get_user_config_path()
    if path is None:
        return DEFAULT_RULES
    return rules_from_dict(_load_yaml_file(path))
