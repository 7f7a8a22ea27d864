"""Fragment syntax colouring with match-segment overlay.

Each language is an ordered table of ``(pattern, token type)`` rules tried at
the current position; token types are coloured with Pygments' terminal
scheme. Matched segments are drawn on top in the theme's emphasis style.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pygments.console import ansiformat
from pygments.formatters.terminal import TERMINAL_COLORS
from pygments.token import Comment, Keyword, Name, Number, String, Text, Token

from ..ansi import sanitize_terminal_text
from ..model.types import Segment
from ..ui_theme import DEFAULT_THEME, UITheme, paint
from .rows import MAX_FRAGMENT_LINES

MAX_LINE_CHARS = 120
ELLIPSIS = "…"

TokenType = type(Token)
TokenRule = tuple[re.Pattern[str], TokenType]


def _keywords(words: str) -> re.Pattern[str]:
    return re.compile(r"(?<![\w$])(?:" + "|".join(words.split()) + r")\b")


_LINE_COMMENT_SLASH = re.compile(r"//[^\n]*")
_LINE_COMMENT_HASH = re.compile(r"#[^\n]*")
_BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
_DOUBLE_STRING = re.compile(r'"(?:[^"\\]|\\.)*"')
_SINGLE_STRING = re.compile(r"'(?:[^'\\]|\\.)*'")
_SINGLE_STRING_RAW = re.compile(r"'[^']*'")
_BACKTICK_STRING = re.compile(r"`(?:[^`\\]|\\.)*`")
_BACKTICK_RAW = re.compile(r"`[^`]*`")
_TRIPLE_DOUBLE = re.compile(r'"""[\s\S]*?"""')
_TRIPLE_SINGLE = re.compile(r"'''[\s\S]*?'''")
_NUMBER = re.compile(r"(?<![\w$])\d+(?:\.\d+)?")
_TS_NUMBER = re.compile(r"(?<![\w$])\d+(?:\.\d+)?(?:[eE][+-]?\d+)?n?")
_JAVA_NUMBER = re.compile(r"(?<![\w$])\d+(?:\.\d+)?[LlFfDd]?")
_WHITESPACE = re.compile(r"\s+")

_TS_KEYWORDS = _keywords(
    "const let var function class import export from as return if else while for do switch case "
    "default break continue new typeof instanceof void null undefined true false this super async "
    "await type interface extends implements public private protected static readonly enum "
    "namespace declare abstract override in of try catch finally throw delete require module"
)
_PY_KEYWORDS = _keywords(
    "def class import from as return if elif else while for in not and or is None True False try "
    "except finally raise with yield lambda pass break continue global nonlocal del assert async await"
)
_GO_KEYWORDS = _keywords(
    "func var const type struct interface import package return if else for range switch case "
    "default break continue go chan select defer map make new nil true false iota fallthrough goto"
)
_RUST_KEYWORDS = _keywords(
    "fn let mut const static struct enum trait impl use mod pub crate super self return if else "
    "while for in loop match break continue type where async await move ref dyn unsafe true false "
    "Some None Ok Err"
)
_RUBY_KEYWORDS = _keywords(
    "def class module end if elsif else unless while until for in do return yield begin rescue "
    "ensure raise require require_relative include extend attr_accessor attr_reader self nil "
    "true false and or not then case when"
)
_JAVA_KEYWORDS = _keywords(
    "public private protected class interface enum extends implements import package return if "
    "else while for do switch case default break continue new null true false static final "
    "abstract void int long double float boolean char byte short try catch finally throw throws "
    "instanceof this super synchronized volatile transient native strictfp val var fun"
)
_SHELL_KEYWORDS = _keywords(
    "if then else elif fi for while until do done case esac function in return export local readonly"
)

TOKEN_RULES: dict[str, tuple[TokenRule, ...]] = {
    "typescript": (
        (_LINE_COMMENT_SLASH, Comment.Single),
        (_BLOCK_COMMENT, Comment.Multiline),
        (_DOUBLE_STRING, String.Double),
        (_SINGLE_STRING, String.Single),
        (_BACKTICK_STRING, String.Backtick),
        (_TS_KEYWORDS, Keyword),
        (_TS_NUMBER, Number),
        (re.compile(r"(?<![\w$])[A-Z][a-zA-Z0-9_$]*"), Name.Builtin),
        (_WHITESPACE, Text),
    ),
    "python": (
        (_LINE_COMMENT_HASH, Comment.Single),
        (_TRIPLE_DOUBLE, String.Doc),
        (_TRIPLE_SINGLE, String.Doc),
        (_DOUBLE_STRING, String.Double),
        (_SINGLE_STRING, String.Single),
        (re.compile(r"@[a-zA-Z_]\w*"), Name.Decorator),
        (_PY_KEYWORDS, Keyword),
        (_NUMBER, Number),
        (_WHITESPACE, Text),
    ),
    "go": (
        (_LINE_COMMENT_SLASH, Comment.Single),
        (_BLOCK_COMMENT, Comment.Multiline),
        (_DOUBLE_STRING, String.Double),
        (_BACKTICK_RAW, String.Backtick),
        (_GO_KEYWORDS, Keyword),
        (_NUMBER, Number),
        (_WHITESPACE, Text),
    ),
    "rust": (
        (_LINE_COMMENT_SLASH, Comment.Single),
        (_BLOCK_COMMENT, Comment.Multiline),
        (_DOUBLE_STRING, String.Double),
        (_RUST_KEYWORDS, Keyword),
        (_NUMBER, Number),
        (re.compile(r"(?<![\w$])[A-Z][A-Z0-9_]+\b"), Name.Constant),
        (_WHITESPACE, Text),
    ),
    "ruby": (
        (_LINE_COMMENT_HASH, Comment.Single),
        (_DOUBLE_STRING, String.Double),
        (_SINGLE_STRING, String.Single),
        (re.compile(r":[a-zA-Z_]\w*"), String.Symbol),
        (re.compile(r"@{1,2}[a-zA-Z_]\w*"), Name.Variable),
        (_RUBY_KEYWORDS, Keyword),
        (_NUMBER, Number),
        (_WHITESPACE, Text),
    ),
    "java": (
        (_LINE_COMMENT_SLASH, Comment.Single),
        (_BLOCK_COMMENT, Comment.Multiline),
        (_TRIPLE_DOUBLE, String.Doc),
        (_DOUBLE_STRING, String.Double),
        (_JAVA_KEYWORDS, Keyword),
        (_JAVA_NUMBER, Number),
        (re.compile(r"(?<![\w$])[A-Z][a-zA-Z0-9_]*"), Name.Builtin),
        (_WHITESPACE, Text),
    ),
    "shell": (
        (_LINE_COMMENT_HASH, Comment.Single),
        (_DOUBLE_STRING, String.Double),
        (_SINGLE_STRING_RAW, String.Single),
        (_BACKTICK_RAW, String.Backtick),
        (re.compile(r"\$\{?[a-zA-Z_]\w*\}?"), Name.Variable),
        (_SHELL_KEYWORDS, Keyword),
        (_NUMBER, Number),
        (_WHITESPACE, Text),
    ),
    "yaml": (
        (_LINE_COMMENT_HASH, Comment.Single),
        (_DOUBLE_STRING, String.Double),
        (_SINGLE_STRING_RAW, String.Single),
        (re.compile(r"[a-zA-Z_][\w-]*(?=\s*:)"), Name.Tag),
        (re.compile(r"(?:true|false|null|~)(?=\s|$)"), Keyword.Constant),
        (_NUMBER, Number),
        (_WHITESPACE, Text),
    ),
    "json": (
        (re.compile(r'"(?:[^"\\]|\\.)*"\s*(?=:)'), Name.Tag),
        (_DOUBLE_STRING, String.Double),
        (re.compile(r"(?:true|false|null)\b"), Keyword.Constant),
        (re.compile(r"-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?"), Number),
        (_WHITESPACE, Text),
    ),
    "css": (
        (_BLOCK_COMMENT, Comment.Multiline),
        (_DOUBLE_STRING, String.Double),
        (_SINGLE_STRING_RAW, String.Single),
        (re.compile(r"#[a-fA-F0-9]{3,8}\b"), Number.Hex),
        (re.compile(r"\.[a-zA-Z_-][\w-]*"), Name.Attribute),
        (re.compile(r"#[a-zA-Z_-][\w-]*"), Keyword),
        (_NUMBER, Number),
        (_WHITESPACE, Text),
    ),
    "html": (
        (re.compile(r"<!--[\s\S]*?-->"), Comment.Multiline),
        (re.compile(r"</?[a-zA-Z][\w:-]*"), Name.Tag),
        (re.compile(r"/?>"), Name.Tag),
        (re.compile(r"[a-zA-Z_:][\w:.-]*(?==)"), Name.Attribute),
        (_DOUBLE_STRING, String.Double),
        (_SINGLE_STRING_RAW, String.Single),
        (_WHITESPACE, Text),
    ),
    "text": ((_WHITESPACE, Text),),
}

_EXTENSION_LANGUAGES: dict[str, str] = {
    "ts": "typescript",
    "tsx": "typescript",
    "js": "typescript",
    "jsx": "typescript",
    "mjs": "typescript",
    "cjs": "typescript",
    "py": "python",
    "pyi": "python",
    "go": "go",
    "rs": "rust",
    "rb": "ruby",
    "java": "java",
    "kt": "java",
    "sh": "shell",
    "bash": "shell",
    "zsh": "shell",
    "fish": "shell",
    "yaml": "yaml",
    "yml": "yaml",
    "json": "json",
    "css": "css",
    "scss": "css",
    "less": "css",
    "html": "html",
    "xml": "html",
    "svelte": "html",
    "vue": "html",
}


def detect_language(file_path: str) -> str:
    """Map a file path to a rule-table name by (case-insensitive) extension."""
    name = file_path.rsplit("/", 1)[-1]
    if "." not in name:
        return "text"
    extension = name.rsplit(".", 1)[-1].lower()
    return _EXTENSION_LANGUAGES.get(extension, "text")


def _token_color(token_type: TokenType) -> str:
    while token_type not in TERMINAL_COLORS:
        token_type = token_type.parent
    # Dark-background variant of Pygments' terminal colour pair.
    return TERMINAL_COLORS[token_type][1]


def _style_token(token_type: TokenType, text: str, theme: UITheme) -> str:
    if not theme.syntax_colors or token_type in Text:
        return text
    color = _token_color(token_type)
    if not color:
        return text
    return ansiformat(color, text)


def syntax_color(text: str, language: str, theme: UITheme = DEFAULT_THEME) -> str:
    """Colour a span with the language rules; unmatched characters go dim one by one."""
    rules = TOKEN_RULES.get(language, TOKEN_RULES["text"])
    out: list[str] = []
    pos = 0
    while pos < len(text):
        for pattern, token_type in rules:
            match = pattern.match(text, pos)
            if match and match.end() > pos:
                out.append(_style_token(token_type, match.group(0), theme))
                pos = match.end()
                break
        else:
            out.append(paint(theme.dim, text[pos], theme))
            pos += 1
    return "".join(out)


@dataclass(frozen=True)
class _LocalSpan:
    start: int
    end: int


def _local_spans(segments: list[Segment], line_start: int, line_end: int, visible_len: int, fragment_len: int) -> list[_LocalSpan]:
    spans: list[_LocalSpan] = []
    for segment in segments:
        start = max(0, min(segment.indices[0], fragment_len))
        end = max(0, min(segment.indices[1], fragment_len))
        if start >= line_end or end <= line_start:
            continue
        local_start = max(0, start - line_start)
        local_end = min(visible_len, end - line_start)
        if local_end > local_start:
            spans.append(_LocalSpan(local_start, local_end))
    return sorted(spans, key=lambda span: (span.start, span.end))


def _render_line(text: str, spans: list[_LocalSpan], language: str, theme: UITheme) -> str:
    out: list[str] = []
    pos = 0
    for span in spans:
        start = max(span.start, pos)
        if span.end <= start:
            continue
        if start > pos:
            out.append(syntax_color(text[pos:start], language, theme))
        out.append(paint(theme.match_highlight, text[start : span.end], theme))
        pos = span.end
    if pos < len(text):
        out.append(syntax_color(text[pos:], language, theme))
    return "".join(out)


def highlight_fragment(
    fragment: str,
    segments: list[Segment],
    file_path: str,
    theme: UITheme = DEFAULT_THEME,
) -> list[str]:
    """Render a fragment as terminal lines with matches emphasised.

    At most ``MAX_FRAGMENT_LINES`` lines are shown, followed by a summary
    line when more exist. Lines are cut to ``MAX_LINE_CHARS`` before the
    overlay, so segments past the cut are dropped and straddling ones are
    clamped.
    """
    language = detect_language(file_path)
    raw_lines = fragment.split("\n")
    fragment_len = len(fragment)
    result: list[str] = []
    offset = 0

    for line in raw_lines[:MAX_FRAGMENT_LINES]:
        line_end = offset + len(line)
        visible = sanitize_terminal_text(line[:MAX_LINE_CHARS])
        spans = _local_spans(segments, offset, line_end, len(visible), fragment_len)
        rendered = _render_line(visible, spans, language, theme)
        if len(line) > MAX_LINE_CHARS:
            rendered += paint(theme.dim, ELLIPSIS, theme)
        result.append(rendered)
        offset = line_end + 1

    hidden = len(raw_lines) - MAX_FRAGMENT_LINES
    if hidden > 0:
        noun = "line" if hidden == 1 else "lines"
        result.append(paint(theme.dim, f"{ELLIPSIS} +{hidden} more {noun}", theme))
    return result
