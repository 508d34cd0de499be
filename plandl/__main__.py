from __future__ import annotations

from .app import run


def main() -> int:
    """Entry point for playing today's puzzle (``python -m plandl`` or ``plandl``)."""
    return run()


if __name__ == "__main__":
    raise SystemExit(main())
