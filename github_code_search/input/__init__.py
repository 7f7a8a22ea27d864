"""Input-layer public API for key decoding and mode dispatch.

Low-level terminal decoding (`read_key`) is kept apart from the per-mode key
tables consumed by the runtime loop.
"""

from .reader import ESC_SEQUENCE_TIMEOUT_MS, _PENDING_BYTES, read_key
from .key_registry import KeyComboBinding, KeyComboRegistry
from .keys import KeyTables, LoopOutcome, active_table, build_key_tables, dispatch_key

__all__ = [
    "read_key",
    "_PENDING_BYTES",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyComboBinding",
    "KeyComboRegistry",
    "KeyTables",
    "LoopOutcome",
    "active_table",
    "build_key_tables",
    "dispatch_key",
]
