"""`python -m cli` entry point, equivalent to the installed `ya-status` script."""

from __future__ import annotations

import sys

from cli.main import run


def main() -> None:
    # Windows consoles default to cp1252; Rich tables and daemon output are UTF-8.
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")
    run()


if __name__ == "__main__":
    main()
