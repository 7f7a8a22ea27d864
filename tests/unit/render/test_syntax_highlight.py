"""Fragment highlighting tests: line capping, truncation, and match overlay."""

from __future__ import annotations

import unittest

from github_code_search.ansi import strip_ansi
from github_code_search.model import Segment
from github_code_search.render.highlight import (
    ELLIPSIS,
    MAX_LINE_CHARS,
    detect_language,
    highlight_fragment,
    syntax_color,
)
from github_code_search.render.rows import MAX_FRAGMENT_LINES, fragment_terminal_lines
from github_code_search.ui_theme import DEFAULT_THEME, PLAIN_THEME

MATCH = DEFAULT_THEME.match_highlight


def _seg(start: int, end: int) -> Segment:
    return Segment(text="", indices=(start, end), line=1, col=start + 1)


class DetectLanguageTests(unittest.TestCase):
    def test_extension_lookup_is_case_insensitive(self) -> None:
        self.assertEqual(detect_language("src/App.TSX"), "typescript")
        self.assertEqual(detect_language("tool.py"), "python")
        self.assertEqual(detect_language("main.go"), "go")
        self.assertEqual(detect_language("lib.rs"), "rust")
        self.assertEqual(detect_language("Main.java"), "java")
        self.assertEqual(detect_language("run.sh"), "shell")
        self.assertEqual(detect_language(".github/ci.yml"), "yaml")
        self.assertEqual(detect_language("package.json"), "json")
        self.assertEqual(detect_language("site.css"), "css")

    def test_unknown_or_missing_extension_falls_back_to_text(self) -> None:
        self.assertEqual(detect_language("Makefile"), "text")
        self.assertEqual(detect_language("notes.unknownext"), "text")


class HighlightFragmentTests(unittest.TestCase):
    def test_plain_theme_emits_no_escape_sequences(self) -> None:
        lines = highlight_fragment("const x = 1; // hi", [_seg(6, 7)], "a.ts", PLAIN_THEME)

        self.assertEqual(lines, ["const x = 1; // hi"])

    def test_output_line_count_matches_row_height_function(self) -> None:
        for count in (1, 3, MAX_FRAGMENT_LINES, MAX_FRAGMENT_LINES + 1, 20):
            fragment = "\n".join(f"line {i}" for i in range(count))
            with self.subTest(lines=count):
                lines = highlight_fragment(fragment, [], "a.py", PLAIN_THEME)
                self.assertEqual(len(lines), fragment_terminal_lines(fragment))

    def test_summary_line_reports_hidden_line_count(self) -> None:
        fragment = "\n".join(str(i) for i in range(MAX_FRAGMENT_LINES + 3))

        lines = highlight_fragment(fragment, [], "a.txt", PLAIN_THEME)

        self.assertEqual(lines[-1], f"{ELLIPSIS} +3 more lines")

    def test_single_hidden_line_uses_singular_noun(self) -> None:
        fragment = "\n".join(str(i) for i in range(MAX_FRAGMENT_LINES + 1))

        lines = highlight_fragment(fragment, [], "a.txt", PLAIN_THEME)

        self.assertEqual(lines[-1], f"{ELLIPSIS} +1 more line")

    def test_long_lines_are_cut_before_overlay(self) -> None:
        line = "a" * (MAX_LINE_CHARS + 30)
        segments = [_seg(MAX_LINE_CHARS - 2, MAX_LINE_CHARS + 5), _seg(MAX_LINE_CHARS + 10, MAX_LINE_CHARS + 20)]

        rendered = highlight_fragment(line, segments, "a.txt", DEFAULT_THEME)[0]

        self.assertEqual(strip_ansi(rendered), "a" * MAX_LINE_CHARS + ELLIPSIS)
        self.assertIn(f"{MATCH}aa{DEFAULT_THEME.reset}", rendered)
        self.assertEqual(rendered.count(MATCH), 1)

    def test_segment_on_second_line_uses_line_local_offsets(self) -> None:
        fragment = "first\nfoo bar"
        start = fragment.index("bar")

        lines = highlight_fragment(fragment, [_seg(start, start + 3)], "a.txt", DEFAULT_THEME)

        self.assertNotIn(MATCH, lines[0])
        self.assertIn(f"{MATCH}bar{DEFAULT_THEME.reset}", lines[1])

    def test_unsorted_and_overlapping_segments_render_left_to_right(self) -> None:
        fragment = "abcdefgh"

        rendered = highlight_fragment(fragment, [_seg(5, 7), _seg(0, 3), _seg(1, 2)], "a.txt", DEFAULT_THEME)[0]

        self.assertEqual(strip_ansi(rendered), fragment)
        self.assertLess(rendered.index(f"{MATCH}abc"), rendered.index(f"{MATCH}fg"))

    def test_out_of_bounds_segments_are_clamped(self) -> None:
        rendered = highlight_fragment("abc", [_seg(1, 99), _seg(50, 60), _seg(-5, 1)], "a.txt", DEFAULT_THEME)[0]

        self.assertEqual(strip_ansi(rendered), "abc")
        self.assertIn(f"{MATCH}bc{DEFAULT_THEME.reset}", rendered)

    def test_control_bytes_are_neutralized(self) -> None:
        lines = highlight_fragment("a\x07b\rc", [], "a.txt", PLAIN_THEME)

        self.assertEqual(lines, ["a?b c"])


class SyntaxColorTests(unittest.TestCase):
    def test_keywords_and_comments_get_styled(self) -> None:
        rendered = syntax_color("def run(): # go", "python", DEFAULT_THEME)

        self.assertEqual(strip_ansi(rendered), "def run(): # go")
        self.assertNotEqual(rendered, strip_ansi(rendered))

    def test_keyword_inside_identifier_is_not_styled_as_keyword(self) -> None:
        with_keyword = syntax_color("if", "python", DEFAULT_THEME)
        inside_identifier = syntax_color("xif", "python", DEFAULT_THEME)

        self.assertNotIn(with_keyword, inside_identifier)

    def test_digits_and_capitals_inside_identifiers_stay_unstyled(self) -> None:
        dim = DEFAULT_THEME.dim
        reset = DEFAULT_THEME.reset

        for language in ("typescript", "java", "rust"):
            with self.subTest(language=language):
                self.assertEqual(syntax_color("a1", language, DEFAULT_THEME), f"{dim}a{reset}{dim}1{reset}")
                self.assertNotEqual(syntax_color("1", language, DEFAULT_THEME), f"{dim}1{reset}")
        self.assertEqual(syntax_color("aB", "typescript", DEFAULT_THEME), f"{dim}a{reset}{dim}B{reset}")

    def test_plain_theme_returns_text_unchanged(self) -> None:
        self.assertEqual(syntax_color('let s = "x"; // c', "typescript", PLAIN_THEME), 'let s = "x"; // c')


if __name__ == "__main__":
    unittest.main()
