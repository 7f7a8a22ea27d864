"""ANSI-aware text measurement and clipping utilities.

Measures visible width and clips styled lines without splitting escapes.
These helpers keep right-aligned labels and line budgets exact in the view.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f]")


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    """Remove escape sequences, leaving the visible characters."""
    return ANSI_ESCAPE_RE.sub("", text)


def ansi_display_width(text: str) -> int:
    """Return the number of terminal columns ``text`` occupies."""
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


def sanitize_terminal_text(source: str) -> str:
    """Neutralize terminal control bytes to avoid side effects (bell, cursor moves, etc.).

    Each control character is replaced by exactly one printable character so
    match offsets computed against the raw fragment stay valid.
    """
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\t"}:
            out.append(ch)
            continue
        if ch == "\r":
            out.append(" ")
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append("?")
            continue
        out.append(ch)
    return "".join(out)


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are preserved verbatim and do not count toward width.
    Tabs are expanded into spaces so clipping aligns with rendered terminal cells.
    A trailing reset is appended when the clipped text carries any styling.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    styled = False
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                styled = True
                i = match.end()
                continue
        if col >= max_cols:
            break
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > max_cols:
            break
        out.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1

    clipped = "".join(out)
    if styled and i < n:
        clipped += "\033[0m"
    return clipped
