"""Deterministic timers for testing retry sessions.

ManualScheduler records scheduled callbacks against a virtual clock and
only runs them when the test advances time, so retry behavior can be
verified without real sleeps.

Example:
    >>> sched = ManualScheduler()
    >>> op = RetryOperation([100, 200], scheduler=sched, clock=sched.clock)
    >>> op.attempt(lambda n: op.retry(RuntimeError("boom")))
    >>> sched.advance(100)
    1
    >>> op.attempts
    2
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable


@dataclass(order=True, slots=True)
class ScheduledCall:
    """Pending callback on the virtual timeline."""
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    delay: float = field(default=0.0, compare=False)
    unref: bool = field(default=False, compare=False)
    cancelled: bool = field(default=False, compare=False)


class ManualScheduler:
    """Scheduler driven by an explicit virtual clock (milliseconds)."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[ScheduledCall] = []
        self._seq = itertools.count()
        self.history: list[ScheduledCall] = []

    def clock(self) -> float:
        """Current virtual time; pass as the ``clock`` of a RetryOperation."""
        return self._now

    def schedule(self, delay: float, callback: Callable[[], None], *, unref: bool = False) -> ScheduledCall:
        call = ScheduledCall(self._now + max(delay, 0), next(self._seq), callback, delay, unref)
        heapq.heappush(self._queue, call)
        self.history.append(call)
        return call

    def cancel(self, handle: object) -> None:
        if isinstance(handle, ScheduledCall):
            handle.cancelled = True

    @property
    def pending(self) -> list[ScheduledCall]:
        return sorted(c for c in self._queue if not c.cancelled)

    @property
    def delays(self) -> list[float]:
        """Requested delay of every call ever scheduled, in scheduling order."""
        return [c.delay for c in self.history]

    def advance(self, ms: float) -> int:
        """Move time forward, firing due callbacks in order. Returns how many ran."""
        target = self._now + ms
        fired = 0
        while self._queue and self._queue[0].due <= target:
            call = heapq.heappop(self._queue)
            if call.cancelled:
                continue
            self._now = call.due
            call.callback()
            fired += 1
        self._now = target
        return fired

    def run_all(self, limit: int = 1000) -> int:
        """Fire pending callbacks until the queue drains or ``limit`` is hit."""
        fired = 0
        while fired < limit and (pending := self.pending):
            fired += self.advance(pending[0].due - self._now)
        return fired
