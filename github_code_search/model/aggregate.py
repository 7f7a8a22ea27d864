"""Per-repository aggregation of raw search matches.

Turns the flat match list into ``RepoGroup`` records in first-seen order.
Exclusion references are normalised here so short and full forms compare equal.
"""

from __future__ import annotations

from collections.abc import Iterable

from .types import CodeMatch, RepoGroup


def normalise_repo(org: str, raw: str) -> str:
    """Qualify a short repository name with ``org``; full names pass through."""
    trimmed = raw.strip()
    return trimmed if "/" in trimmed else f"{org}/{trimmed}"


def normalise_extract_ref(org: str, raw: str) -> str:
    """Normalise the repository component of ``repo:path:index``."""
    trimmed = raw.strip()
    repo_part, sep, rest = trimmed.partition(":")
    if not sep:
        return trimmed
    return f"{normalise_repo(org, repo_part)}:{rest}"


def extract_ref(repo_full_name: str, path: str, match_index: int) -> str:
    """Build the exclusion reference for one match of one repository."""
    return f"{repo_full_name}:{path}:{match_index}"


def parse_csv_list(raw: str | None) -> list[str]:
    """Split a comma-separated option value, dropping blank entries."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def aggregate(
    matches: Iterable[CodeMatch],
    excluded_repos: set[str],
    excluded_extract_refs: set[str],
    include_archived: bool = False,
) -> list[RepoGroup]:
    """Group ``matches`` per repository with everything selected and folded.

    A repository is dropped when it is excluded, or when archived repos are
    not included and every one of its matches is archived. Extract exclusion
    uses the index of the match within its own repository; those indices
    are kept on the group so replayed exclusions address the same matches.
    """
    by_repo: dict[str, list[CodeMatch]] = {}
    for match in matches:
        if match.repo_full_name in excluded_repos:
            continue
        by_repo.setdefault(match.repo_full_name, []).append(match)

    groups: list[RepoGroup] = []
    for repo_full_name, repo_matches in by_repo.items():
        if not include_archived and all(m.archived for m in repo_matches):
            continue
        kept = [
            (idx, m)
            for idx, m in enumerate(repo_matches)
            if extract_ref(repo_full_name, m.path, idx) not in excluded_extract_refs
        ]
        groups.append(
            RepoGroup(
                repo_full_name=repo_full_name,
                matches=[m for _, m in kept],
                folded=True,
                repo_selected=True,
                extract_selected=[True] * len(kept),
                match_indices=[idx for idx, _ in kept],
            )
        )
    return groups
