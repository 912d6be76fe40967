"""Time helpers shared by the credential engine, accounts and the store."""

from typing import Callable
from datetime import datetime
from pytz import UTC

Clock = Callable[[], datetime]
"""A zero-argument callable that returns the current (aware) UTC time."""


def now() -> datetime:
    """Get the current time in UTC."""
    return datetime.now(tz=UTC)


def epoch(t: datetime) -> int:
    """Convert a :class:`.datetime` to UNIX time."""
    delta = t - datetime.fromtimestamp(0, tz=UTC)
    return int(round(delta.total_seconds()))


def from_epoch(t: int) -> datetime:
    """Get a :class:`datetime` from an UNIX timestamp."""
    return datetime.fromtimestamp(t, tz=UTC)
