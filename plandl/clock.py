from __future__ import annotations

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Wall-clock abstraction.

    Core logic depends on this interface rather than reading the local date
    directly, so "today" can be pinned in tests.
    """

    def now(self) -> datetime:
        """Return the current local (naive) datetime."""


class RealClock:
    """Production clock backed by datetime.now()."""

    def now(self) -> datetime:
        return datetime.now()
