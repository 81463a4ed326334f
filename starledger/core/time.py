"""starledger.core.time

The ledger counts in whole seconds.

This module is the *only* clock surface in the codebase.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

Clock = Callable[[], int]


def utc_now() -> datetime:
    """Return an aware UTC datetime."""

    return datetime.now(tz=UTC)


def unix_seconds(now: datetime | None = None) -> int:
    """Return unix time truncated to whole seconds.

    Args:
        now: Override clock for testing.
    """

    ref = now or utc_now()
    if ref.tzinfo is None:
        ref = ref.replace(tzinfo=UTC)
    return int(ref.timestamp())


def elapsed_seconds(since: int, *, now: int | None = None) -> int:
    """Seconds between ``since`` and ``now``. Negative when ``since`` is in the future."""

    ref = unix_seconds() if now is None else now
    return ref - since
