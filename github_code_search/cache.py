"""On-disk TTL cache for team membership lookups.

Team lists are quasi-static and can cost dozens of API requests, so they are
kept for 24 hours. Reads fall back to ``None`` and writes are best effort.
"""

from __future__ import annotations

import json
import logging
import os
import re
import time
from pathlib import Path
from typing import Any

from platformdirs import user_cache_dir

from .config import APP_NAME

logger = logging.getLogger(__name__)

CACHE_DIR_ENV = "GITHUB_CODE_SEARCH_CACHE_DIR"
CACHE_TTL_SECONDS = 24 * 60 * 60
_UNSAFE_FILENAME_RE = re.compile(r"[^a-zA-Z0-9_.-]")


def get_cache_dir() -> Path:
    """Cache directory, overridable through ``GITHUB_CODE_SEARCH_CACHE_DIR``."""
    override = os.environ.get(CACHE_DIR_ENV, "").strip()
    if override:
        return Path(override)
    return Path(user_cache_dir(APP_NAME, appauthor=False))


def _safe_filename(value: str) -> str:
    return _UNSAFE_FILENAME_RE.sub("_", value)


def get_cache_key(org: str, prefixes: list[str]) -> str:
    """Deterministic file name for ``org`` + prefixes; prefix order does not matter."""
    parts = [_safe_filename(org), *(_safe_filename(prefix) for prefix in sorted(prefixes))]
    return f"teams__{'__'.join(parts)}.json"


def read_cache(key: str) -> Any | None:
    """Return the cached value, or ``None`` when missing, stale, or unreadable."""
    path = get_cache_dir() / key
    try:
        age = time.time() - path.stat().st_mtime
        if age > CACHE_TTL_SECONDS:
            logger.debug("cache entry %s expired", path)
            return None
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None


def write_cache(key: str, data: Any) -> None:
    """Serialize ``data`` under ``key``; write failures are logged and ignored."""
    try:
        cache_dir = get_cache_dir()
        cache_dir.mkdir(parents=True, exist_ok=True)
        (cache_dir / key).write_text(json.dumps(data), encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.debug("could not write cache entry %s: %s", key, exc)
