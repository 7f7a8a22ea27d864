"""Terminal control helpers for the interactive session.

Owns raw-mode lifecycle, alternate-screen switching, and frame output.
The saved tty attributes are restored on every exit path of ``raw_mode``.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

CLEAR_AND_HOME = "\x1b[2J\x1b[H"


class TerminalController:
    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        # Enter alternate screen and hide cursor.
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l")

    def disable_tui_mode(self) -> None:
        # Show cursor and restore the main screen buffer.
        os.write(self.stdout_fd, b"\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def draw(self, frame: str) -> None:
        """Clear the screen and write ``frame`` from the top-left corner."""
        # Raw mode turns off output post-processing, so LF alone would not return the carriage.
        payload = (CLEAR_AND_HOME + frame.replace("\n", "\r\n")).encode("utf-8")
        while payload:
            written = os.write(self.stdout_fd, payload)
            payload = payload[written:]

    @contextlib.contextmanager
    def raw_mode(self):
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
