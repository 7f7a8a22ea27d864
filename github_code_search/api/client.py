"""GitHub REST client for code search and team membership.

Search results carry fragment-relative offsets only; absolute line numbers
are recovered by locating each fragment in the file's raw content.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any
from urllib.parse import urlencode

import requests

from ..model.types import CodeMatch, Segment, TextMatch, count_label
from .retry import fetch_with_retry, paginated_fetch

logger = logging.getLogger(__name__)

API_ROOT = "https://api.github.com"
API_VERSION = "2022-11-28"
TEXT_MATCH_ACCEPT = "application/vnd.github.text-match+json"
JSON_ACCEPT = "application/vnd.github+json"
PAGE_SIZE = 100
# GitHub never returns more than this many code search results.
SEARCH_RESULT_CAP = 1000
SEARCH_PAGE_DELAY_SECONDS = 0.25
RAW_FETCH_WORKERS = 8


class GitHubAPIError(RuntimeError):
    """Non-OK response from the GitHub API."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


def to_raw_url(html_url: str) -> str:
    """Map a ``github.com/.../blob/...`` URL to its raw.githubusercontent.com form."""
    return html_url.replace("https://github.com/", "https://raw.githubusercontent.com/", 1).replace(
        "/blob/", "/", 1
    )


def segment_line_col(fragment: str, offset: int) -> tuple[int, int]:
    """1-based (line, column) of ``offset`` within ``fragment``."""
    before = fragment[: max(0, offset)]
    line = before.count("\n") + 1
    col = len(before) - (before.rfind("\n") + 1) + 1
    return line, col


def compute_fragment_start_line(content: str, fragment: str) -> int:
    """1-based line where ``fragment`` starts in ``content``; 1 when not found."""
    if not fragment:
        return 1
    idx = content.find(fragment)
    if idx == -1:
        return 1
    return content.count("\n", 0, idx) + 1


def _parse_segment(raw: dict[str, Any], fragment: str, start_line: int) -> Segment:
    indices = raw.get("indices") or [0, 0]
    start, end = int(indices[0]), int(indices[1])
    frag_line, col = segment_line_col(fragment, start)
    return Segment(text=raw.get("text") or "", indices=(start, end), line=start_line + frag_line - 1, col=col)


def parse_code_item(item: dict[str, Any], content: str | None = None) -> CodeMatch:
    """Convert one raw search item into a ``CodeMatch``."""
    text_matches: list[TextMatch] = []
    for raw_match in item.get("text_matches") or []:
        fragment = raw_match.get("fragment") or ""
        start_line = compute_fragment_start_line(content, fragment) if content else 1
        segments = [_parse_segment(seg, fragment, start_line) for seg in raw_match.get("matches") or []]
        text_matches.append(TextMatch(fragment=fragment, matches=segments))
    repository = item.get("repository") or {}
    return CodeMatch(
        path=item["path"],
        repo_full_name=repository["full_name"],
        html_url=item["html_url"],
        text_matches=text_matches,
        archived=repository.get("archived") is True,
    )


def _raise_for_status(response: requests.Response, context: str) -> None:
    if response.ok:
        return
    raise GitHubAPIError(
        response.status_code,
        f"GitHub API error {response.status_code}{context}: {response.text}",
    )


class GitHubClient:
    def __init__(
        self,
        token: str,
        session_factory: Callable[[], requests.Session] = requests.Session,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.token = token
        self._session_factory = session_factory
        self._local = threading.local()
        self._sessions: list[requests.Session] = []
        self._sessions_lock = threading.Lock()
        self._sleep = sleep

    @property
    def session(self) -> requests.Session:
        """HTTP session of the calling thread; worker threads never share one."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._session_factory()
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def close(self) -> None:
        """Close every session opened so far."""
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        self._local = threading.local()
        for session in sessions:
            session.close()

    def _headers(self, accept: str = TEXT_MATCH_ACCEPT) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": accept,
            "X-GitHub-Api-Version": API_VERSION,
        }

    def _get(self, url: str, headers: dict[str, str]) -> requests.Response:
        return fetch_with_retry(self.session, url, headers, sleep=self._sleep)

    def search_code(self, query: str, org: str, page: int = 1) -> tuple[list[dict[str, Any]], int]:
        """Fetch one page of code search results and the reported total."""
        params = urlencode({"q": f"{query} org:{org}", "per_page": PAGE_SIZE, "page": page})
        response = self._get(f"{API_ROOT}/search/code?{params}", self._headers())
        _raise_for_status(response, "")
        data = response.json()
        return list(data.get("items") or []), int(data.get("total_count") or 0)

    def _fetch_raw_content(self, html_url: str) -> str | None:
        try:
            response = self._get(to_raw_url(html_url), {"Authorization": f"Bearer {self.token}"})
        except requests.RequestException as exc:
            logger.debug("raw fetch failed for %s: %s", html_url, exc)
            return None
        if not response.ok:
            return None
        return response.text

    def fetch_raw_contents(self, html_urls: list[str]) -> dict[str, str]:
        """Download raw file contents concurrently; failures are left out."""
        if not html_urls:
            return {}
        with ThreadPoolExecutor(max_workers=RAW_FETCH_WORKERS, thread_name_prefix="github-raw-fetch") as executor:
            contents = list(executor.map(self._fetch_raw_content, html_urls))
        return {url: content for url, content in zip(html_urls, contents) if content is not None}

    def fetch_all_results(self, query: str, org: str) -> list[CodeMatch]:
        """Page through every search result, then resolve absolute line numbers."""
        logger.info("Fetching results from GitHub…")
        items: list[dict[str, Any]] = []
        page = 1
        while True:
            batch, total = self.search_code(query, org, page)
            if not batch:
                break
            items.extend(batch)
            if len(items) >= total or len(items) >= SEARCH_RESULT_CAP:
                break
            page += 1
            self._sleep(SEARCH_PAGE_DELAY_SECONDS)

        urls = list(
            dict.fromkeys(
                item["html_url"]
                for item in items
                if any(m.get("fragment") for m in item.get("text_matches") or [])
            )
        )
        contents = self.fetch_raw_contents(urls)
        return [parse_code_item(item, contents.get(item["html_url"])) for item in items]

    def _list_teams(self, org: str) -> list[dict[str, Any]]:
        def fetch_page(page: int) -> list[dict[str, Any]]:
            params = urlencode({"per_page": PAGE_SIZE, "page": page})
            response = self._get(f"{API_ROOT}/orgs/{org}/teams?{params}", self._headers(JSON_ACCEPT))
            _raise_for_status(response, " (list teams)")
            return list(response.json())

        return paginated_fetch(fetch_page, PAGE_SIZE, sleep=self._sleep)

    def _team_repos(self, org: str, slug: str) -> list[str]:
        def fetch_page(page: int) -> list[dict[str, Any]]:
            params = urlencode({"per_page": PAGE_SIZE, "page": page})
            response = self._get(f"{API_ROOT}/orgs/{org}/teams/{slug}/repos?{params}", self._headers(JSON_ACCEPT))
            if not response.ok:
                # Nested or secret teams answer 404.
                if response.status_code != 404:
                    logger.warning('Warning: could not fetch repos for team "%s" (HTTP %s)', slug, response.status_code)
                return []
            return list(response.json())

        return [repo["full_name"] for repo in paginated_fetch(fetch_page, PAGE_SIZE, sleep=self._sleep)]

    def fetch_repo_teams(self, org: str, prefixes: list[str]) -> dict[str, list[str]]:
        """Map repo full names to the slugs of matching teams that own them.

        Teams match when their slug starts with any prefix, ignoring case.
        Requires a token with ``read:org`` scope.
        """
        lower_prefixes = [prefix.lower() for prefix in prefixes]
        slugs = [
            team["slug"]
            for team in self._list_teams(org)
            if any(team["slug"].lower().startswith(prefix) for prefix in lower_prefixes)
        ]
        prefix_word = "prefix" if len(prefixes) == 1 else "prefixes"
        logger.info(
            "Fetching repos for %s matching %s [%s]…",
            count_label(len(slugs), "team"),
            prefix_word,
            ", ".join(prefixes),
        )

        repo_teams: dict[str, list[str]] = {}
        if not slugs:
            return repo_teams
        with ThreadPoolExecutor(max_workers=RAW_FETCH_WORKERS, thread_name_prefix="github-team-repos") as executor:
            team_repos = list(executor.map(lambda slug: self._team_repos(org, slug), slugs))
        for slug, repos in zip(slugs, team_repos):
            for repo in repos:
                owners = repo_teams.setdefault(repo, [])
                if slug not in owners:
                    owners.append(slug)
        return repo_teams
