"""Module entrypoint.

Allows:
    python -m release_logger
"""

from __future__ import annotations

from release_logger.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
