"""Path-filter matching and filter-bar statistics."""

from __future__ import annotations

from dataclasses import dataclass

from ..model.types import RepoGroup


def path_matches_filter(path: str, filter_path: str) -> bool:
    """Return whether ``path`` contains ``filter_path``, ignoring case."""
    if not filter_path:
        return True
    return filter_path.lower() in path.lower()


@dataclass(frozen=True)
class FilterStats:
    """Visible/hidden counts for one confirmed filter."""

    visible_repos: int
    hidden_repos: int
    visible_matches: int
    hidden_matches: int


def build_filter_stats(groups: list[RepoGroup], filter_path: str) -> FilterStats:
    """Count repos and matches whose paths do or do not contain the filter."""
    visible_repos = hidden_repos = visible_matches = hidden_matches = 0
    for group in groups:
        matching = sum(1 for m in group.matches if path_matches_filter(m.path, filter_path))
        if matching > 0:
            visible_repos += 1
        else:
            hidden_repos += 1
        visible_matches += matching
        hidden_matches += len(group.matches) - matching
    return FilterStats(
        visible_repos=visible_repos,
        hidden_repos=hidden_repos,
        visible_matches=visible_matches,
        hidden_matches=hidden_matches,
    )
