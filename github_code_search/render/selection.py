"""In-place selection mutations on the repository arena.

Every mutation leaves ``repo_selected == any(extract_selected)`` except the
unfiltered bulk paths, which set both sides to the same value directly.
"""

from __future__ import annotations

from ..model.types import RepoGroup, Row
from .filter import path_matches_filter


def _sync_repo_selected(group: RepoGroup) -> None:
    group.repo_selected = any(group.extract_selected)


def _set_group_selection(group: RepoGroup, selected: bool, filter_path: str) -> None:
    if not filter_path:
        group.repo_selected = selected
        group.extract_selected[:] = [selected] * len(group.matches)
        return
    matching = [idx for idx, m in enumerate(group.matches) if path_matches_filter(m.path, filter_path)]
    if not matching:
        return
    for idx in matching:
        group.extract_selected[idx] = selected
    _sync_repo_selected(group)


def _apply_bulk_selection(groups: list[RepoGroup], context_row: Row, selected: bool, filter_path: str) -> None:
    if context_row.kind == "repo":
        for group in groups:
            _set_group_selection(group, selected, filter_path)
    elif context_row.kind == "extract" and 0 <= context_row.repo_index < len(groups):
        _set_group_selection(groups[context_row.repo_index], selected, filter_path)


def apply_select_all(groups: list[RepoGroup], context_row: Row, filter_path: str = "") -> None:
    """Select every repo (repo row) or the current repo's extracts (extract row).

    With a filter only matching extracts change; groups without any
    matching path are left untouched.
    """
    _apply_bulk_selection(groups, context_row, True, filter_path)


def apply_select_none(groups: list[RepoGroup], context_row: Row, filter_path: str = "") -> None:
    """Deselect counterpart of :func:`apply_select_all`."""
    _apply_bulk_selection(groups, context_row, False, filter_path)


def toggle_row_selection(groups: list[RepoGroup], row: Row) -> None:
    """Flip one extract, or a whole repo and all of its extracts."""
    if not 0 <= row.repo_index < len(groups):
        return
    group = groups[row.repo_index]
    if row.kind == "repo":
        group.repo_selected = not group.repo_selected
        group.extract_selected[:] = [group.repo_selected] * len(group.matches)
    elif row.kind == "extract" and row.extract_index is not None:
        if 0 <= row.extract_index < len(group.extract_selected):
            group.extract_selected[row.extract_index] = not group.extract_selected[row.extract_index]
            _sync_repo_selected(group)
