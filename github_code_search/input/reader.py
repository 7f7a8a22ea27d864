"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing and multi-byte UTF-8 characters.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
MAX_CSI_PARAMETER_BYTES = 32
_PENDING_BYTES: list[bytes] = []

_ARROW_FINALS = {b"A": "UP", b"B": "DOWN", b"C": "RIGHT", b"D": "LEFT"}
_SINGLE_BYTE_KEYS = {
    b"\x03": "CTRL_C",
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\r": "ENTER",
    b"\n": "ENTER",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _read_utf8_char(fd: int, lead: bytes) -> str:
    data = lead
    for _ in range(_utf8_length(lead[0]) - 1):
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            break
        data += nxt
    return data.decode("utf-8", errors="replace")


def _read_csi(fd: int) -> str:
    # ESC [ <parameter/intermediate bytes> <final byte 0x40-0x7e>
    consumed = 0
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "UNKNOWN"
        if 0x40 <= part[0] <= 0x7E:
            return _ARROW_FINALS.get(part, "UNKNOWN")
        consumed += 1
        if consumed > MAX_CSI_PARAMETER_BYTES:
            return "UNKNOWN"


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token; ``""`` on timeout or end of input."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = os.read(fd, 1)
        if not ch:
            return ""

    if ch in _SINGLE_BYTE_KEYS:
        return _SINGLE_BYTE_KEYS[ch]

    if ch != b"\x1b":
        return _read_utf8_char(fd, ch)

    # Escape / arrow key sequences.
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"[":
        return _read_csi(fd)
    if seq == b"O":
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return "UNKNOWN"
        return _ARROW_FINALS.get(final, "UNKNOWN")
    _PENDING_BYTES.append(seq)
    return "ESC"
