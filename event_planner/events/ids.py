"""Clock and id generation capabilities.

Both are injected into the repository and the planner so tests can pin
"now" and supply deterministic ids.
"""
from __future__ import annotations

import itertools
from datetime import datetime, timezone
from typing import Optional, Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        """Return the current instant as an aware datetime."""
        ...


class IdGenerator(Protocol):
    def new_id(self) -> str:
        """Return an id not previously returned by this generator."""
        ...


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """A clock that reports a settable instant."""

    def __init__(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant


class TimestampIdGenerator:
    """Millisecond-timestamp ids, bumped so consecutive ids never collide.

    Two creates in the same millisecond would otherwise share an id.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or SystemClock()
        self._last = 0

    def new_id(self) -> str:
        millis = int(self._clock.now().timestamp() * 1000)
        if millis <= self._last:
            millis = self._last + 1
        self._last = millis
        return str(millis)


class SequentialIdGenerator:
    """Deterministic ids (``evt-1``, ``evt-2``, ...) for tests and demos."""

    def __init__(self, prefix: str = "evt-", start: int = 1) -> None:
        self._prefix = prefix
        self._counter = itertools.count(start)

    def new_id(self) -> str:
        return f"{self._prefix}{next(self._counter)}"
