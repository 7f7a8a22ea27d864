"""Static key-binding help screen.

Replaces the whole frame while help is toggled on. Presentation-only and
side-effect free.
"""

from __future__ import annotations

from ..ui_theme import UITheme, paint

HELP_BAR_WIDTH = 62

# (keys, description) pairs laid out two per line.
HELP_BINDINGS: tuple[tuple[tuple[str, str], tuple[str, str]], ...] = (
    (("↑ / k", "navigate up"), ("↓ / j", "navigate down")),
    (("←", "fold repo"), ("→", "unfold repo")),
    (("Space", "toggle selection"), ("Enter", "confirm & output")),
    (("a", "select all"), ("n", "select none")),
    (("f", "enter filter mode"), ("r", "reset filter")),
    (("h / ?", "toggle this help"), ("q / Ctrl+C", "quit")),
)

KEY_COLUMN_WIDTH = 12
DESCRIPTION_COLUMN_WIDTH = 23


def _binding_cell(keys: str, description: str, theme: UITheme) -> str:
    styled_keys = " / ".join(paint(theme.help_key, part, theme) for part in keys.split(" / "))
    padding = " " * max(1, KEY_COLUMN_WIDTH - len(keys))
    return f"{styled_keys}{padding}{description}"


def help_lines(theme: UITheme) -> list[str]:
    """Return the help screen as individual lines."""
    bar = paint(theme.dim, "─" * HELP_BAR_WIDTH, theme)
    lines = [bar, f"  {paint(theme.help_heading, 'Key bindings', theme)}", bar]
    for (left_keys, left_desc), (right_keys, right_desc) in HELP_BINDINGS:
        left = _binding_cell(left_keys, left_desc.ljust(DESCRIPTION_COLUMN_WIDTH), theme)
        right = _binding_cell(right_keys, right_desc, theme)
        lines.append(f"  {left}{right}")
        if left_keys == "a":
            lines.append(" " * 17 + paint(theme.dim, "(respects active filter)", theme))
    lines.extend(
        [
            bar,
            f"  {paint(theme.dim, 'Filter mode:', theme)}  type to filter by path · Enter confirm · Esc cancel",
            bar,
            "  "
            + paint(theme.dim, "press ", theme)
            + paint(theme.help_key, "h", theme)
            + paint(theme.dim, " or ", theme)
            + paint(theme.help_key, "?", theme)
            + paint(theme.dim, " to close", theme),
        ]
    )
    return lines


def render_help_overlay(theme: UITheme) -> str:
    """Render the full help screen that replaces the normal view."""
    return "\n".join(help_lines(theme))
