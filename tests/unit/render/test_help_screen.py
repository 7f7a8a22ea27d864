"""Help screen rendering tests."""

from __future__ import annotations

import unittest

from github_code_search.ansi import ansi_display_width, strip_ansi
from github_code_search.render import RenderOptions, render_groups, render_help_overlay
from github_code_search.render.help import help_lines
from github_code_search.ui_theme import DEFAULT_THEME, PLAIN_THEME


class HelpScreenTests(unittest.TestCase):
    def test_lists_every_binding_in_two_columns(self) -> None:
        lines = [strip_ansi(line) for line in help_lines(DEFAULT_THEME)]

        self.assertEqual(lines[1], "  Key bindings")
        self.assertIn("  a" + " " * 11 + "select all".ljust(23) + "n" + " " * 11 + "select none", lines)
        text = "\n".join(lines)
        for label in ("fold repo", "toggle selection", "confirm & output", "reset filter", "quit"):
            self.assertIn(label, text)
        self.assertTrue(lines[-1].endswith("press h or ? to close"))

    def test_select_all_note_follows_its_row(self) -> None:
        lines = [strip_ansi(line) for line in help_lines(PLAIN_THEME)]

        row = next(i for i, line in enumerate(lines) if "select all" in line)
        self.assertEqual(lines[row + 1].strip(), "(respects active filter)")

    def test_plain_theme_emits_no_escape_codes(self) -> None:
        self.assertNotIn("\033[", render_help_overlay(PLAIN_THEME))

    def test_help_replaces_frame_and_is_clipped_to_width(self) -> None:
        frame = render_groups([], 0, [], 10, 0, "q", "acme", RenderOptions(show_help=True, term_width=20))

        self.assertNotIn("github-code-search", strip_ansi(frame))
        self.assertTrue(all(ansi_display_width(line) <= 20 for line in frame.split("\n")))


if __name__ == "__main__":
    unittest.main()
