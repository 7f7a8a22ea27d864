"""Module entrypoint for ``python -m github_code_search``.

This keeps module-mode execution behavior identical to the console script.
All argument parsing and session setup happen in ``github_code_search.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
