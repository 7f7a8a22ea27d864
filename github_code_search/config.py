"""Persistent JSON config helpers.

Supplies defaults for the organisation, output format, output type, and UI
theme. All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "github-code-search"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

FORMAT_CHOICES: tuple[str, ...] = ("markdown", "json")
OUTPUT_TYPE_CHOICES: tuple[str, ...] = ("repo-and-matches", "repo-only")


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _load_string(key: str, choices: tuple[str, ...] | None = None) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    if not stripped:
        return None
    if choices is not None and stripped not in choices:
        return None
    return stripped


def load_default_org() -> str | None:
    """Organisation used when ``--org`` is not given."""
    return _load_string("org")


def load_default_format() -> str | None:
    return _load_string("format", FORMAT_CHOICES)


def load_default_output_type() -> str | None:
    return _load_string("output_type", OUTPUT_TYPE_CHOICES)


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    return _load_string("theme")
