"""Pagination and rate-limit-aware retry helpers.

The only place that knows GitHub's rate-limit semantics: 429 and 503 are
retried with exponential backoff, honouring ``Retry-After`` when present.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable, Mapping
from typing import TypeVar

import requests

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = frozenset({429, 503})
BASE_RETRY_DELAY_SECONDS = 1.0
MAX_RETRY_DELAY_SECONDS = 60.0
REQUEST_TIMEOUT_SECONDS = 30

ItemT = TypeVar("ItemT")


def retry_delay(attempt: int, retry_after: str | None) -> float:
    """Seconds to wait before retry number ``attempt`` (0-based), before jitter."""
    if retry_after is not None:
        try:
            seconds = int(retry_after.strip())
        except ValueError:
            seconds = 0
        if seconds > 0:
            return float(seconds)
    return min(BASE_RETRY_DELAY_SECONDS * 2**attempt, MAX_RETRY_DELAY_SECONDS)


def fetch_with_retry(
    session: requests.Session,
    url: str,
    headers: Mapping[str, str] | None = None,
    max_retries: int = 3,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> requests.Response:
    """GET ``url``, retrying rate-limited and unavailable responses.

    Non-retryable responses, successful or not, are returned immediately.
    Once ``max_retries`` is exhausted the last response is returned, so
    callers must still check ``response.ok``.
    """
    attempt = 0
    while True:
        response = session.get(url, headers=dict(headers or {}), timeout=REQUEST_TIMEOUT_SECONDS)
        if response.status_code not in RETRYABLE_STATUSES or attempt >= max_retries:
            return response
        # ±10 % jitter so concurrent retries spread out.
        delay = retry_delay(attempt, response.headers.get("Retry-After")) * random.uniform(0.9, 1.1)
        logger.debug("HTTP %s for %s, retrying in %.1fs", response.status_code, url, delay)
        response.close()
        sleep(delay)
        attempt += 1


def paginated_fetch(
    fetch_page: Callable[[int], list[ItemT]],
    page_size: int = 100,
    delay: float = 0.0,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> list[ItemT]:
    """Collect pages starting at 1 until a page shorter than ``page_size`` arrives."""
    items: list[ItemT] = []
    page = 1
    while True:
        batch = fetch_page(page)
        items.extend(batch)
        if len(batch) < page_size:
            return items
        page += 1
        if delay > 0:
            sleep(delay)
