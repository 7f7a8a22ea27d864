from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SessionState:
    cursor: int = 0
    scroll_offset: int = 0
    filter_path: str = ""
    filter_mode: bool = False
    filter_input: str = ""
    show_help: bool = False
    term_height: int = 24
    term_width: int = 80
    dirty: bool = True
