"""Interactive session transitions over the repository arena.

``InteractiveSession`` owns the groups and the ``SessionState`` and exposes
one method per user action. Every method re-clamps cursor and scroll so the
state is always drawable.
"""

from __future__ import annotations

from ..model.types import RepoGroup, Row
from ..render import (
    RenderOptions,
    body_viewport_height,
    filter_bar_visible,
    render_groups,
    sticky_repo_index,
)
from ..render.rows import build_rows, is_cursor_visible, repo_row_index
from ..render.selection import apply_select_all, apply_select_none, toggle_row_selection
from ..ui_theme import DEFAULT_THEME, UITheme
from .state import SessionState


class InteractiveSession:
    def __init__(
        self,
        groups: list[RepoGroup],
        query: str = "",
        org: str = "",
        *,
        theme: UITheme = DEFAULT_THEME,
        state: SessionState | None = None,
    ) -> None:
        self.groups = groups
        self.query = query
        self.org = org
        self.theme = theme
        self.state = state if state is not None else SessionState()
        self.clamp()

    @property
    def active_filter(self) -> str:
        """Filter applied to rows: the draft while editing, else the confirmed one."""
        if self.state.filter_mode:
            return self.state.filter_input
        return self.state.filter_path

    def rows(self) -> list[Row]:
        return build_rows(self.groups, self.active_filter)

    def current_row(self) -> Row | None:
        rows = self.rows()
        if 0 <= self.state.cursor < len(rows):
            return rows[self.state.cursor]
        return None

    def viewport_height(self, rows: list[Row], scroll_offset: int) -> int:
        """Body budget for ``scroll_offset``, counting the sticky line it would cause."""
        state = self.state
        sticky = sticky_repo_index(rows, state.cursor, scroll_offset) is not None
        return body_viewport_height(
            state.term_height,
            filter_bar_visible(state.filter_mode, state.filter_path),
            sticky,
        )

    def resize(self, term_height: int, term_width: int) -> None:
        state = self.state
        if (term_height, term_width) == (state.term_height, state.term_width):
            return
        state.term_height = term_height
        state.term_width = term_width
        self.clamp()

    def _clamp_cursor(self, rows: list[Row]) -> None:
        state = self.state
        if not rows:
            state.cursor = 0
            return
        cursor = max(0, min(state.cursor, len(rows) - 1))
        if rows[cursor].kind == "section":
            forward = next((idx for idx in range(cursor + 1, len(rows)) if rows[idx].kind != "section"), None)
            if forward is None:
                forward = next((idx for idx in range(cursor - 1, -1, -1) if rows[idx].kind != "section"), cursor)
            cursor = forward
        state.cursor = cursor

    def _scroll_to_cursor(self, rows: list[Row]) -> None:
        state = self.state
        if not rows:
            state.scroll_offset = 0
            return
        scroll = max(0, min(state.scroll_offset, len(rows) - 1))
        if state.cursor < scroll:
            scroll = state.cursor
        # Keep the section header of the first member in view.
        if scroll == state.cursor and scroll > 0 and rows[scroll - 1].kind == "section":
            scroll -= 1
        while scroll < state.cursor and not is_cursor_visible(
            rows,
            self.groups,
            state.cursor,
            scroll,
            self.viewport_height(rows, scroll),
            require_full=True,
        ):
            scroll += 1
        state.scroll_offset = scroll

    def clamp(self) -> None:
        """Bring cursor and scroll back into range for the current rows."""
        rows = self.rows()
        self._clamp_cursor(rows)
        self._scroll_to_cursor(rows)
        self.state.dirty = True

    def move(self, delta: int) -> None:
        """Move the cursor ``delta`` selectable rows, stopping at either end."""
        rows = self.rows()
        step = 1 if delta > 0 else -1
        cursor = self.state.cursor
        for _ in range(abs(delta)):
            candidate = cursor + step
            while 0 <= candidate < len(rows) and rows[candidate].kind == "section":
                candidate += step
            if not 0 <= candidate < len(rows):
                break
            cursor = candidate
        self.state.cursor = cursor
        self.clamp()

    def fold(self) -> None:
        """Fold the current repo; from an extract row the cursor jumps to its repo."""
        row = self.current_row()
        if row is None or row.kind == "section" or not 0 <= row.repo_index < len(self.groups):
            return
        self.groups[row.repo_index].folded = True
        if row.kind == "extract":
            self.state.cursor = repo_row_index(self.rows(), row.repo_index)
        self.clamp()

    def unfold(self) -> None:
        row = self.current_row()
        if row is None or row.kind != "repo" or not 0 <= row.repo_index < len(self.groups):
            return
        self.groups[row.repo_index].folded = False
        self.clamp()

    def toggle_selection(self) -> None:
        row = self.current_row()
        if row is None:
            return
        toggle_row_selection(self.groups, row)
        self.state.dirty = True

    def select_all(self) -> None:
        row = self.current_row()
        if row is None:
            return
        apply_select_all(self.groups, row, self.state.filter_path)
        self.state.dirty = True

    def select_none(self) -> None:
        row = self.current_row()
        if row is None:
            return
        apply_select_none(self.groups, row, self.state.filter_path)
        self.state.dirty = True

    def enter_filter_mode(self) -> None:
        self.state.filter_mode = True
        self.state.filter_input = self.state.filter_path
        self.clamp()

    def filter_append(self, text: str) -> None:
        self.state.filter_input += text
        self.clamp()

    def filter_backspace(self) -> None:
        self.state.filter_input = self.state.filter_input[:-1]
        self.clamp()

    def cancel_filter(self) -> None:
        """Drop the draft and go back to the previously confirmed filter."""
        self.state.filter_mode = False
        self.state.filter_input = ""
        self.clamp()

    def confirm_filter(self) -> None:
        self.state.filter_path = self.state.filter_input
        self.state.filter_mode = False
        self.clamp()

    def reset_filter(self) -> None:
        self.state.filter_path = ""
        self.state.filter_input = ""
        self.state.filter_mode = False
        self.clamp()

    def toggle_help(self) -> None:
        self.state.show_help = not self.state.show_help
        self.state.dirty = True

    def render(self) -> str:
        """Compose the frame for the current state."""
        state = self.state
        options = RenderOptions(
            filter_path=state.filter_path,
            filter_mode=state.filter_mode,
            filter_input=state.filter_input,
            show_help=state.show_help,
            term_width=state.term_width,
            theme=self.theme,
        )
        return render_groups(
            self.groups,
            state.cursor,
            self.rows(),
            state.term_height,
            state.scroll_offset,
            self.query,
            self.org,
            options,
        )
