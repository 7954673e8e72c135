"""Time source injected into every expiry comparison."""
from __future__ import annotations

import datetime as dt
from typing import Protocol


class Clock(Protocol):
    def now(self) -> dt.datetime: ...


class SystemClock:
    """Wall-clock UTC time."""

    def now(self) -> dt.datetime:
        return dt.datetime.now(dt.timezone.utc)


class FixedClock:
    """Clock frozen at a given instant; handy for tests and replays."""

    def __init__(self, instant: dt.datetime) -> None:
        self.instant = to_utc(instant)

    def now(self) -> dt.datetime:
        return self.instant

    def advance(self, delta: dt.timedelta) -> None:
        self.instant = self.instant + delta


def to_utc(value: dt.datetime) -> dt.datetime:
    """Normalise ``value`` to an aware UTC datetime; naive values are taken as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)
