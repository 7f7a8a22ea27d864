"""Row flattening and terminal-line accounting for the result list.

Rows index into the ``RepoGroup`` list instead of holding references, so the
list is cheap to rebuild on every keystroke. ``row_terminal_lines`` is the
single source of row heights for both rendering and scrolling.
"""

from __future__ import annotations

from ..model.types import RepoGroup, Row
from .filter import path_matches_filter

MAX_FRAGMENT_LINES = 6
SECTION_ROW_LINES = 2


def fragment_terminal_lines(fragment: str) -> int:
    """Return how many lines the highlighter emits for ``fragment``."""
    line_count = len(fragment.split("\n"))
    truncated = 1 if line_count > MAX_FRAGMENT_LINES else 0
    return min(line_count, MAX_FRAGMENT_LINES) + truncated


def row_terminal_lines(group: RepoGroup | None, row: Row) -> int:
    """Number of terminal lines one row occupies when rendered."""
    if row.kind == "section":
        return SECTION_ROW_LINES
    if row.kind == "repo" or group is None or row.extract_index is None:
        return 1
    if not 0 <= row.extract_index < len(group.matches):
        return 1
    match = group.matches[row.extract_index]
    if not match.text_matches:
        return 1
    return 1 + fragment_terminal_lines(match.text_matches[0].fragment)


def group_for_row(groups: list[RepoGroup], row: Row) -> RepoGroup | None:
    """Resolve the group a row points at, or ``None`` for section rows."""
    if 0 <= row.repo_index < len(groups):
        return groups[row.repo_index]
    return None


def build_rows(groups: list[RepoGroup], filter_path: str = "") -> list[Row]:
    """Flatten groups into rows, hiding repos with no path matching the filter.

    A section row precedes the first visible group of each section, so a
    section whose leading groups are filtered out still gets its header.
    Folded groups never contribute extract rows.
    """
    rows: list[Row] = []
    pending_label: str | None = None
    for repo_index, group in enumerate(groups):
        if group.section_label is not None:
            pending_label = group.section_label
        visible = [
            idx for idx, match in enumerate(group.matches) if path_matches_filter(match.path, filter_path)
        ]
        if filter_path and not visible:
            continue
        if pending_label is not None:
            rows.append(Row(kind="section", section_label=pending_label))
            pending_label = None
        rows.append(Row(kind="repo", repo_index=repo_index))
        if not group.folded:
            for extract_index in visible:
                rows.append(Row(kind="extract", repo_index=repo_index, extract_index=extract_index))
    return rows


def repo_row_index(rows: list[Row], repo_index: int) -> int:
    """Return the position of the repo row for ``repo_index``, or -1."""
    for idx, row in enumerate(rows):
        if row.kind == "repo" and row.repo_index == repo_index:
            return idx
    return -1


def total_terminal_lines(rows: list[Row], groups: list[RepoGroup]) -> int:
    """Sum of all row heights, i.e. lines needed to show every row."""
    return sum(row_terminal_lines(group_for_row(groups, row), row) for row in rows)


def is_cursor_visible(
    rows: list[Row],
    groups: list[RepoGroup],
    cursor: int,
    scroll_offset: int,
    viewport_height: int,
    require_full: bool = False,
) -> bool:
    """Return whether the cursor row starts inside the viewport.

    With ``require_full`` the row must also fit entirely, matching what the
    renderer actually draws (the first row of a frame always counts).
    """
    used_lines = 0
    for idx in range(max(0, scroll_offset), len(rows)):
        if used_lines >= viewport_height:
            return False
        row = rows[idx]
        height = row_terminal_lines(group_for_row(groups, row), row)
        if idx == cursor:
            if not require_full or used_lines == 0:
                return True
            return used_lines + height <= viewport_height
        used_lines += height
    return False
