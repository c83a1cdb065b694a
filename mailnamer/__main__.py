"""Module execution support for ``python -m mailnamer``."""

from __future__ import annotations

from mailnamer.cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
