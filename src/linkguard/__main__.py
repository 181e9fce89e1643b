"""CLI entrypoint for linkguard."""

from __future__ import annotations

from linkguard.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
