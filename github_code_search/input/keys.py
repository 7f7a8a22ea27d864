"""Keyboard dispatch tables for help, filter, and normal modes.

Each mode has its own registry, so a key only acts in the modes whose table
binds it. Handlers return a ``LoopOutcome`` telling the loop what to do next.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .key_registry import KeyComboBinding, KeyComboRegistry

if TYPE_CHECKING:
    from ..runtime.session import InteractiveSession


class LoopOutcome(Enum):
    CONTINUE = "continue"
    CONFIRM = "confirm"
    QUIT = "quit"


@dataclass(frozen=True)
class KeyTables:
    help: KeyComboRegistry[LoopOutcome]
    filter: KeyComboRegistry[LoopOutcome]
    normal: KeyComboRegistry[LoopOutcome]


def _action(callback: Callable[[], None]) -> Callable[[], LoopOutcome]:
    def handler() -> LoopOutcome:
        callback()
        return LoopOutcome.CONTINUE

    return handler


def _quit() -> LoopOutcome:
    return LoopOutcome.QUIT


def _confirm() -> LoopOutcome:
    return LoopOutcome.CONFIRM


def build_key_tables(session: InteractiveSession) -> KeyTables:
    """Bind every key action of ``session`` into the three mode tables."""
    help_table: KeyComboRegistry[LoopOutcome] = KeyComboRegistry()
    help_table.register_bindings(
        KeyComboBinding(("h", "?"), _action(session.toggle_help)),
        KeyComboBinding(("q", "CTRL_C"), _quit),
    )

    def append_printable(key: str) -> LoopOutcome | None:
        if len(key) != 1 or not key.isprintable():
            return None
        session.filter_append(key)
        return LoopOutcome.CONTINUE

    filter_table: KeyComboRegistry[LoopOutcome] = KeyComboRegistry(fallback=append_printable)
    filter_table.register_bindings(
        KeyComboBinding(("ENTER",), _action(session.confirm_filter)),
        KeyComboBinding(("ESC",), _action(session.cancel_filter)),
        KeyComboBinding(("BACKSPACE",), _action(session.filter_backspace)),
        KeyComboBinding(("CTRL_C",), _quit),
    )

    normal_table: KeyComboRegistry[LoopOutcome] = KeyComboRegistry()
    normal_table.register_bindings(
        KeyComboBinding(("k", "UP"), _action(lambda: session.move(-1))),
        KeyComboBinding(("j", "DOWN"), _action(lambda: session.move(1))),
        KeyComboBinding(("LEFT",), _action(session.fold)),
        KeyComboBinding(("RIGHT",), _action(session.unfold)),
        KeyComboBinding((" ",), _action(session.toggle_selection)),
        KeyComboBinding(("a",), _action(session.select_all)),
        KeyComboBinding(("n",), _action(session.select_none)),
        KeyComboBinding(("f",), _action(session.enter_filter_mode)),
        KeyComboBinding(("r",), _action(session.reset_filter)),
        KeyComboBinding(("h", "?"), _action(session.toggle_help)),
        KeyComboBinding(("ENTER",), _confirm),
        KeyComboBinding(("q", "CTRL_C"), _quit),
    )
    return KeyTables(help=help_table, filter=filter_table, normal=normal_table)


def active_table(session: InteractiveSession, tables: KeyTables) -> KeyComboRegistry[LoopOutcome]:
    """Help overrides filter mode, which overrides normal mode."""
    if session.state.show_help:
        return tables.help
    if session.state.filter_mode:
        return tables.filter
    return tables.normal


def dispatch_key(session: InteractiveSession, key: str, tables: KeyTables | None = None) -> LoopOutcome:
    """Route ``key`` through the table for the session's current mode."""
    if tables is None:
        tables = build_key_tables(session)
    outcome = active_table(session, tables).dispatch(key)
    return outcome if outcome is not None else LoopOutcome.CONTINUE
