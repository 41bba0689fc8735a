"""Module entrypoint for running whereis as ``python -m whereis``."""

from __future__ import annotations

from whereis.cli import main


if __name__ == "__main__":
    main()
