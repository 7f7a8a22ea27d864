"""Viewport renderer for the interactive result list.

Composes one full frame (header, filter bar, sticky repo line, body rows and
footer) as a string. Rendering never mutates groups or session state.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..ansi import ansi_display_width, clip_ansi_line
from ..model.types import RepoGroup, Row, count_label, primary_segment
from ..ui_theme import DEFAULT_THEME, UITheme, paint
from .filter import FilterStats, build_filter_stats, path_matches_filter
from .help import render_help_overlay
from .highlight import highlight_fragment
from .rows import (
    MAX_FRAGMENT_LINES,
    build_rows,
    group_for_row,
    is_cursor_visible,
    repo_row_index,
    row_terminal_lines,
    total_terminal_lines,
)
from .selection import apply_select_all, apply_select_none, toggle_row_selection
from .summary import (
    build_match_count_label,
    build_selection_summary,
    build_summary,
    build_summary_full,
)

HEADER_LINES = 2  # title + summary
FOOTER_LINES = 2  # key hints + position indicator
INDENT = "  "
KEY_HINTS = "← / → fold/unfold  ↑ / ↓ navigate  spc select  a all  n none  f filter  h help  ↵ confirm  q quit"


@dataclass
class RenderOptions:
    filter_path: str = ""
    filter_mode: bool = False
    filter_input: str = ""
    show_help: bool = False
    term_width: int = 80
    theme: UITheme = field(default=DEFAULT_THEME)


def filter_bar_visible(filter_mode: bool, filter_path: str) -> bool:
    """The filter bar shows while editing or while a confirmed filter is active."""
    return filter_mode or bool(filter_path)


def sticky_repo_index(rows: list[Row], cursor: int, scroll_offset: int) -> int | None:
    """Return the repo index to pin above the body, if its header scrolled away."""
    if not 0 <= cursor < len(rows):
        return None
    cursor_row = rows[cursor]
    if cursor_row.kind != "extract":
        return None
    header_index = repo_row_index(rows, cursor_row.repo_index)
    if 0 <= header_index < scroll_offset:
        return cursor_row.repo_index
    return None


def body_viewport_height(term_height: int, filter_bar: bool, sticky: bool) -> int:
    """Terminal lines left for body rows once the fixed chrome is laid out."""
    chrome = HEADER_LINES + FOOTER_LINES + (1 if filter_bar else 0) + (1 if sticky else 0)
    return max(1, term_height - chrome)


def _checkbox(selected: bool, theme: UITheme) -> str:
    return paint(theme.checkbox, "✓", theme) if selected else " "


def _title_line(query: str, org: str, theme: UITheme) -> str:
    return (
        f"{paint(theme.title_badge, ' github-code-search ', theme)} "
        f"{paint(theme.title_query, query, theme)} "
        f"{paint(theme.dim, 'in', theme)} "
        f"{paint(theme.title_org, org, theme)}"
    )


def _filter_stats_text(stats: FilterStats) -> str:
    shown = (
        f"{count_label(stats.visible_matches, 'match', 'matches')} in "
        f"{count_label(stats.visible_repos, 'repo')} shown"
    )
    hidden = f"{stats.hidden_matches} hidden in {count_label(stats.hidden_repos, 'repo')}"
    return f"{shown} · {hidden}  r to reset"


def _filter_bar_line(groups: list[RepoGroup], options: RenderOptions) -> str | None:
    theme = options.theme
    if options.filter_mode:
        caret = paint(theme.filter_cursor, " ", theme)
        hint = paint(theme.dim, "Enter confirm · Esc cancel", theme)
        return f"🔍 {paint(theme.filter_label, 'Filter:', theme)} {options.filter_input}{caret}  {hint}"
    if options.filter_path:
        stats = build_filter_stats(groups, options.filter_path)
        return (
            f"🔍 {paint(theme.filter_label, 'filter:', theme)} "
            f"{paint(theme.filter_value, options.filter_path, theme)}  "
            f"{paint(theme.dim, _filter_stats_text(stats), theme)}"
        )
    return None


def _sticky_line(group: RepoGroup, theme: UITheme) -> str:
    return (
        f"{paint(theme.dim, '▲', theme)} {_checkbox(group.repo_selected, theme)} "
        f"{paint(theme.repo_name, group.repo_full_name, theme)} "
        f"{paint(theme.dim, build_match_count_label(group), theme)}"
    )


def _repo_line(group: RepoGroup, is_cursor: bool, options: RenderOptions) -> str:
    theme = options.theme
    arrow = paint(theme.fold_arrow, "▸" if group.folded else "▾", theme)
    if is_cursor:
        name = paint(theme.cursor, f" {group.repo_full_name} ", theme)
    else:
        name = paint(theme.repo_name, group.repo_full_name, theme)
    count = paint(theme.dim, build_match_count_label(group), theme)
    left = f"{arrow} {_checkbox(group.repo_selected, theme)} {name}"
    pad = max(0, options.term_width - ansi_display_width(left) - ansi_display_width(count))
    return f"{left}{' ' * pad}{count}"


def _extract_lines(group: RepoGroup, extract_index: int, is_cursor: bool, options: RenderOptions) -> list[str]:
    theme = options.theme
    match = group.matches[extract_index]
    segment = primary_segment(match)
    location = f":{segment.line}:{segment.col}" if segment is not None else ""
    if is_cursor:
        path = paint(theme.cursor, f" {match.path}{location} ", theme)
    else:
        path = f"{paint(theme.path, match.path, theme)}{paint(theme.dim, location, theme)}"
    selected = group.extract_selected[extract_index] if extract_index < len(group.extract_selected) else False
    lines = [f"{INDENT}{INDENT}{_checkbox(selected, theme)} {path}"]
    if match.text_matches:
        text_match = match.text_matches[0]
        for fragment_line in highlight_fragment(text_match.fragment, text_match.matches, match.path, theme):
            lines.append(f"{INDENT}{INDENT}{INDENT}{fragment_line}")
    return lines


def _row_lines(groups: list[RepoGroup], row: Row, is_cursor: bool, options: RenderOptions) -> list[str]:
    if row.kind == "section":
        return ["", paint(options.theme.section, f"── {row.section_label} ", options.theme)]
    group = group_for_row(groups, row)
    if group is None:
        return []
    if row.kind == "repo":
        return [_repo_line(group, is_cursor, options)]
    if row.extract_index is None or not 0 <= row.extract_index < len(group.matches):
        return [""]
    return _extract_lines(group, row.extract_index, is_cursor, options)


def render_groups(
    groups: list[RepoGroup],
    cursor: int,
    rows: list[Row],
    term_height: int,
    scroll_offset: int,
    query: str,
    org: str,
    options: RenderOptions | None = None,
) -> str:
    """Render one full frame of the result list.

    The body walks rows from ``scroll_offset`` and stops before the first row
    that would overflow the viewport, except that at least one row is always
    drawn. Every line is clipped to ``options.term_width``.
    """
    options = options if options is not None else RenderOptions()
    theme = options.theme
    if options.show_help:
        return "\n".join(clip_ansi_line(line, options.term_width) for line in render_help_overlay(theme).split("\n"))

    scroll_offset = max(0, min(scroll_offset, max(0, len(rows) - 1)))
    lines: list[str] = [_title_line(query, org, theme), build_summary_full(groups)]

    filter_bar = _filter_bar_line(groups, options)
    if filter_bar is not None:
        lines.append(filter_bar)

    sticky_index = sticky_repo_index(rows, cursor, scroll_offset)
    if sticky_index is not None:
        lines.append(_sticky_line(groups[sticky_index], theme))

    viewport_height = body_viewport_height(term_height, filter_bar is not None, sticky_index is not None)
    used_lines = 0
    last_drawn = scroll_offset - 1
    for idx in range(scroll_offset, len(rows)):
        row = rows[idx]
        height = row_terminal_lines(group_for_row(groups, row), row)
        if used_lines + height > viewport_height and used_lines > 0:
            break
        lines.extend(_row_lines(groups, row, idx == cursor, options))
        used_lines += height
        last_drawn = idx
        if used_lines >= viewport_height:
            break

    lines.append(paint(theme.dim, KEY_HINTS, theme))
    if rows:
        position = f"  ↕ row {scroll_offset + 1}–{last_drawn + 1} of {len(rows)}"
    else:
        position = "  no matching rows"
    lines.append(paint(theme.dim, position, theme))

    return "\n".join(clip_ansi_line(line, options.term_width) for line in lines)


__all__ = [
    "FOOTER_LINES",
    "HEADER_LINES",
    "MAX_FRAGMENT_LINES",
    "RenderOptions",
    "apply_select_all",
    "apply_select_none",
    "body_viewport_height",
    "build_filter_stats",
    "build_match_count_label",
    "build_rows",
    "build_selection_summary",
    "build_summary",
    "build_summary_full",
    "filter_bar_visible",
    "highlight_fragment",
    "is_cursor_visible",
    "path_matches_filter",
    "render_groups",
    "render_help_overlay",
    "repo_row_index",
    "row_terminal_lines",
    "sticky_repo_index",
    "toggle_row_selection",
    "total_terminal_lines",
]
