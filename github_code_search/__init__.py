"""Public package surface for github-code-search.

Exports ``main`` for programmatic CLI invocation.
Most implementation lives in submodules under ``github_code_search``.
"""

from __future__ import annotations

__version__ = "1.4.0"


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = ["main", "__version__"]
