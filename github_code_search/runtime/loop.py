"""Main interactive event loop for the result picker.

Reads one key at a time, routes it through the mode tables, and redraws.
The terminal stays in raw mode only inside ``terminal.raw_mode()``.
"""

from __future__ import annotations

import shutil
import sys
from collections.abc import Callable

from ..input import LoopOutcome, build_key_tables, dispatch_key, read_key
from ..model.types import RepoGroup
from ..terminal import TerminalController
from ..ui_theme import DEFAULT_THEME, UITheme
from .session import InteractiveSession

# Idle wake-up interval used to notice terminal resizes.
RESIZE_POLL_MS = 200


def run_interactive(
    groups: list[RepoGroup],
    query: str,
    org: str,
    *,
    theme: UITheme = DEFAULT_THEME,
    terminal: TerminalController | None = None,
    read_key_fn: Callable[..., str] = read_key,
    stdin_fd: int | None = None,
) -> list[RepoGroup] | None:
    """Run the picker until the user confirms or quits.

    Returns the (mutated) groups on confirm and ``None`` on quit or
    interrupt. Terminal state is restored before this function returns.
    """
    if stdin_fd is None:
        stdin_fd = sys.stdin.fileno()
    if terminal is None:
        terminal = TerminalController(stdin_fd, sys.stdout.fileno())

    session = InteractiveSession(groups, query, org, theme=theme)
    state = session.state
    tables = build_key_tables(session)

    try:
        with terminal.raw_mode():
            while True:
                term = shutil.get_terminal_size((80, 24))
                session.resize(term.lines, term.columns)
                if state.dirty:
                    terminal.draw(session.render())
                    state.dirty = False

                key = read_key_fn(stdin_fd, timeout_ms=RESIZE_POLL_MS)
                if not key:
                    continue

                outcome = dispatch_key(session, key, tables)
                if outcome is LoopOutcome.CONFIRM:
                    return session.groups
                if outcome is LoopOutcome.QUIT:
                    return None
                state.dirty = True
    except KeyboardInterrupt:
        return None
