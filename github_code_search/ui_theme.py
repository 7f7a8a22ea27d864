"""UI theme definitions and selection helpers.

Themes are UI-only ANSI palettes (header/rows/help chrome). Token colours for
code fragments come from Pygments' terminal scheme and are toggled by
``syntax_colors``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    dim: str
    bold: str
    title_badge: str
    title_query: str
    title_org: str
    fold_arrow: str
    checkbox: str
    repo_name: str
    cursor: str
    path: str
    section: str
    match_highlight: str
    filter_label: str
    filter_value: str
    filter_cursor: str
    help_heading: str
    help_key: str
    syntax_colors: bool


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    dim="\033[2m",
    bold="\033[1m",
    title_badge="\033[1;45m",
    title_query="\033[1;36m",
    title_org="\033[1;33m",
    fold_arrow="\033[35m",
    checkbox="\033[32m",
    repo_name="\033[1m",
    cursor="\033[1;97;45m",
    path="\033[36m",
    section="\033[1;35m",
    match_highlight="\033[1;33m",
    filter_label="\033[1m",
    filter_value="\033[33m",
    filter_cursor="\033[7m",
    help_heading="\033[1m",
    help_key="\033[33m",
    syntax_colors=True,
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    dim="\033[2;38;5;110m",
    bold="\033[1m",
    title_badge="\033[1;48;5;24m",
    title_query="\033[1;38;5;45m",
    title_org="\033[1;38;5;153m",
    fold_arrow="\033[38;5;39m",
    checkbox="\033[38;5;84m",
    repo_name="\033[1;38;5;117m",
    cursor="\033[1;97;48;5;31m",
    path="\033[38;5;117m",
    section="\033[1;38;5;45m",
    match_highlight="\033[1;38;5;215m",
    filter_label="\033[1;38;5;45m",
    filter_value="\033[38;5;153m",
    filter_cursor="\033[7m",
    help_heading="\033[1;38;5;45m",
    help_key="\033[38;5;153m",
    syntax_colors=True,
)

# No colour; inverse video still marks the cursor and the filter caret.
PLAIN_THEME = UITheme(
    name="plain",
    reset="\033[0m",
    dim="",
    bold="",
    title_badge="",
    title_query="",
    title_org="",
    fold_arrow="",
    checkbox="",
    repo_name="",
    cursor="\033[7m",
    path="",
    section="",
    match_highlight="",
    filter_label="",
    filter_value="",
    filter_cursor="\033[7m",
    help_heading="",
    help_key="",
    syntax_colors=False,
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def paint(style: str, text: str, theme: UITheme) -> str:
    """Wrap ``text`` in ``style`` and the theme reset; no-op for empty styles."""
    if not style or not text:
        return text
    return f"{style}{text}{theme.reset}"


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if not candidate:
        return DEFAULT_THEME.name
    if candidate == PLAIN_THEME.name:
        return DEFAULT_THEME.name
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    normalized = normalize_theme_name(name)
    return _THEMES.get(normalized, DEFAULT_THEME)


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "paint",
    "resolve_theme",
]
