"""Count labels and summary lines for the header and markdown output."""

from __future__ import annotations

from ..model.types import RepoGroup, count_label


def build_match_count_label(group: RepoGroup) -> str:
    """Return ``"3 matches"`` or ``"3 matches, 1 selected"``."""
    total = len(group.matches)
    selected = sum(1 for flag in group.extract_selected if flag)
    label = count_label(total, "match", "matches")
    if selected < total:
        return f"{label}, {selected} selected"
    return label


def count_unique_paths(groups: list[RepoGroup]) -> int:
    """Count distinct paths across repos; a path in three repos counts once."""
    return len({m.path for g in groups for m in g.matches})


def count_selected_unique_paths(groups: list[RepoGroup]) -> int:
    """Count distinct paths selected in at least one repo."""
    return len({m.path for g in groups for m, flag in zip(g.matches, g.extract_selected) if flag})


def count_selected_matches(groups: list[RepoGroup]) -> int:
    return sum(1 for g in groups for flag in g.extract_selected if flag)


def _join_segments(repo_str: str, file_str: str, match_str: str, files: int, matches: int) -> str:
    if files == matches:
        return f"{repo_str} · {file_str}"
    return f"{repo_str} · {file_str} · {match_str}"


def build_summary(groups: list[RepoGroup]) -> str:
    """Compact repo + file + match counts without selection detail."""
    files = count_unique_paths(groups)
    matches = sum(len(g.matches) for g in groups)
    return _join_segments(
        count_label(len(groups), "repo"),
        count_label(files, "file"),
        count_label(matches, "match", "matches"),
        files,
        matches,
    )


def build_summary_full(groups: list[RepoGroup]) -> str:
    """Header summary annotated with ``(N selected)`` where not everything is."""

    def annotate(total: int, selected: int, singular: str, plural: str | None = None) -> str:
        label = count_label(total, singular, plural)
        return f"{label} ({selected} selected)" if selected < total else label

    total_repos = len(groups)
    selected_repos = sum(1 for g in groups if g.repo_selected)
    total_files = count_unique_paths(groups)
    selected_files = count_selected_unique_paths(groups)
    total_matches = sum(len(g.matches) for g in groups)
    selected_matches = count_selected_matches(groups)
    return _join_segments(
        annotate(total_repos, selected_repos, "repo"),
        annotate(total_files, selected_files, "file"),
        annotate(total_matches, selected_matches, "match", "matches"),
        total_files,
        total_matches,
    )


def build_selection_summary(groups: list[RepoGroup]) -> str:
    """Plain summary of the current selection for non-interactive output."""
    selected_repos = sum(1 for g in groups if g.repo_selected)
    selected_files = count_selected_unique_paths(groups)
    selected_matches = count_selected_matches(groups)
    summary = _join_segments(
        count_label(selected_repos, "repo"),
        count_label(selected_files, "file"),
        count_label(selected_matches, "match", "matches"),
        selected_files,
        selected_matches,
    )
    return f"{summary} selected"
