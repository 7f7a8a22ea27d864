"""Interactive session transition tests: cursor, scroll, fold, filter, selection."""

from __future__ import annotations

import unittest

from github_code_search.model import CodeMatch, RepoGroup, Segment, TextMatch
from github_code_search.render.rows import is_cursor_visible
from github_code_search.runtime import InteractiveSession, SessionState
from github_code_search.ui_theme import PLAIN_THEME


def _match(repo: str, path: str, fragment: str = "a\nb\nc") -> CodeMatch:
    return CodeMatch(
        path=path,
        repo_full_name=repo,
        html_url="https://example.invalid",
        text_matches=[TextMatch(fragment=fragment, matches=[Segment("a", (0, 1), 1, 1)])],
    )


def _group(name: str, paths: list[str], folded: bool = True, section_label: str | None = None) -> RepoGroup:
    return RepoGroup(
        repo_full_name=name,
        matches=[_match(name, p) for p in paths],
        folded=folded,
        extract_selected=[True] * len(paths),
        section_label=section_label,
    )


class CursorMovementTests(unittest.TestCase):
    def test_initial_cursor_skips_leading_section_row(self) -> None:
        session = InteractiveSession([_group("acme/a", ["x"], section_label="squad-a")])

        self.assertEqual(session.state.cursor, 1)
        self.assertEqual(session.current_row().kind, "repo")

    def test_move_skips_sections_and_stops_at_ends(self) -> None:
        groups = [_group("acme/a", ["x"], section_label="s1"), _group("acme/b", ["y"], section_label="s2")]
        session = InteractiveSession(groups)

        session.move(1)
        self.assertEqual(session.state.cursor, 3)
        session.move(1)
        self.assertEqual(session.state.cursor, 3)
        session.move(-1)
        self.assertEqual(session.state.cursor, 1)
        session.move(-1)
        self.assertEqual(session.state.cursor, 1)

    def test_moving_to_first_member_brings_section_header_into_view(self) -> None:
        groups = [_group("acme/a", ["x"], section_label="s1"), _group("acme/b", ["y"], section_label="s2")]
        session = InteractiveSession(groups, state=SessionState(cursor=3, scroll_offset=3))

        self.assertEqual(session.state.scroll_offset, 2)
        session.move(-1)
        self.assertEqual(session.state.scroll_offset, 0)

    def test_scrolling_keeps_cursor_row_fully_visible(self) -> None:
        groups = [_group("acme/a", [f"f{i}.py" for i in range(6)], folded=False)]
        session = InteractiveSession(groups, state=SessionState(term_height=12))

        for _ in range(6):
            session.move(1)
            rows = session.rows()
            scroll = session.state.scroll_offset
            self.assertTrue(
                is_cursor_visible(
                    rows,
                    groups,
                    session.state.cursor,
                    scroll,
                    session.viewport_height(rows, scroll),
                    require_full=True,
                )
            )
        self.assertEqual(session.state.cursor, 6)
        self.assertGreater(session.state.scroll_offset, 0)

    def test_resize_reclamps_scroll(self) -> None:
        groups = [_group("acme/a", [f"f{i}.py" for i in range(6)], folded=False)]
        session = InteractiveSession(groups, state=SessionState(term_height=60))
        session.move(6)
        self.assertEqual(session.state.scroll_offset, 0)

        session.resize(10, 80)

        self.assertGreater(session.state.scroll_offset, 0)
        self.assertEqual((session.state.term_height, session.state.term_width), (10, 80))


class FoldTests(unittest.TestCase):
    def test_unfold_then_fold_from_extract_returns_to_repo_row(self) -> None:
        session = InteractiveSession([_group("acme/a", ["x", "y"])])

        session.unfold()
        self.assertEqual(len(session.rows()), 3)
        session.move(2)
        session.fold()

        self.assertTrue(session.groups[0].folded)
        self.assertEqual(session.state.cursor, 0)
        self.assertEqual(len(session.rows()), 1)

    def test_unfold_on_extract_row_is_ignored(self) -> None:
        session = InteractiveSession([_group("acme/a", ["x"], folded=False)])
        session.move(1)

        session.unfold()

        self.assertEqual(session.state.cursor, 1)
        self.assertFalse(session.groups[0].folded)


class FilterTests(unittest.TestCase):
    def setUp(self) -> None:
        self.groups = [
            _group("acme/a", ["src/a.ts", "lib/b.ts"], folded=False),
            _group("acme/b", ["lib/c.ts"], folded=False),
        ]
        self.session = InteractiveSession(self.groups, theme=PLAIN_THEME)

    def _type(self, text: str) -> None:
        for ch in text:
            self.session.filter_append(ch)

    def test_draft_filters_rows_live_and_cancel_restores(self) -> None:
        self.session.enter_filter_mode()
        self._type("src")
        self.assertEqual(len(self.session.rows()), 2)

        self.session.cancel_filter()

        self.assertFalse(self.session.state.filter_mode)
        self.assertEqual(self.session.state.filter_path, "")
        self.assertEqual(len(self.session.rows()), 5)

    def test_confirm_then_reedit_prefills_and_cancel_keeps_confirmed(self) -> None:
        self.session.enter_filter_mode()
        self._type("lib")
        self.session.confirm_filter()
        self.assertEqual(self.session.state.filter_path, "lib")
        self.assertEqual(len(self.session.rows()), 4)

        self.session.enter_filter_mode()
        self.assertEqual(self.session.state.filter_input, "lib")
        self.session.filter_backspace()
        self.assertEqual(self.session.state.filter_input, "li")
        self.session.cancel_filter()

        self.assertEqual(self.session.state.filter_path, "lib")

    def test_cursor_clamps_when_filter_shrinks_rows(self) -> None:
        self.session.move(4)

        self.session.enter_filter_mode()
        self._type("src")

        self.assertEqual(self.session.state.cursor, 1)

    def test_reset_clears_filter(self) -> None:
        self.session.enter_filter_mode()
        self._type("src")
        self.session.confirm_filter()

        self.session.reset_filter()

        self.assertEqual(self.session.state.filter_path, "")
        self.assertEqual(len(self.session.rows()), 5)

    def test_bulk_selection_uses_confirmed_filter(self) -> None:
        self.session.enter_filter_mode()
        self._type("src")
        self.session.confirm_filter()

        self.session.select_none()

        self.assertEqual(self.groups[0].extract_selected, [False, True])
        self.assertEqual(self.groups[1].extract_selected, [True])
        self.session.select_all()
        self.assertEqual(self.groups[0].extract_selected, [True, True])


class SelectionAndRenderTests(unittest.TestCase):
    def test_toggle_selection_marks_state_dirty(self) -> None:
        session = InteractiveSession([_group("acme/a", ["x"])])
        session.state.dirty = False

        session.toggle_selection()

        self.assertFalse(session.groups[0].repo_selected)
        self.assertTrue(session.state.dirty)

    def test_render_uses_session_dimensions_and_help_flag(self) -> None:
        session = InteractiveSession([_group("acme/a", ["x"])], "needle", "acme", theme=PLAIN_THEME)

        frame = session.render()
        self.assertIn("needle", frame.split("\n")[0])

        session.toggle_help()
        self.assertIn("Key bindings", session.render())

    def test_empty_group_list_is_drawable(self) -> None:
        session = InteractiveSession([])

        session.move(1)
        session.fold()
        session.toggle_selection()

        self.assertEqual(session.state.cursor, 0)
        self.assertIn("no matching rows", session.render())


if __name__ == "__main__":
    unittest.main()
