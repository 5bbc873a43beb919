"""Module entrypoint for ``python -m keyreader``.

This keeps module-mode execution behavior identical to the CLI script.
All argument parsing and session setup happen in ``keyreader.cli``.
"""

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
