"""Timer capability used by RetryOperation to space out attempts.

A scheduler runs a callback after a delay and can cancel it before it
fires. Two runtimes are provided:

- ThreadScheduler: threading.Timer per callback, usable from plain sync code
- AsyncioScheduler: loop.call_later on an event loop

Delays are given in milliseconds.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class Scheduler(Protocol):
    """Protocol for one-shot delayed callbacks."""

    def schedule(self, delay: float, callback: Callable[[], None], *, unref: bool = False) -> object:
        """Run ``callback`` after ``delay`` ms and return a cancellable handle.

        Args:
            delay: Delay in milliseconds
            callback: Zero-argument callable
            unref: Pending timer must not keep the process alive, where supported
        """
        ...

    def cancel(self, handle: object) -> None:
        """Cancel a handle returned by schedule(). No-op if it already fired."""
        ...


class ThreadScheduler:
    """Scheduler backed by threading.Timer.

    ``unref`` timers run on daemon threads so a pending retry does not
    hold interpreter shutdown open.
    """

    __slots__ = ("_name",)

    def __init__(self, name: str = "retrycase-timer") -> None:
        self._name = name

    def schedule(self, delay: float, callback: Callable[[], None], *, unref: bool = False) -> threading.Timer:
        timer = threading.Timer(max(delay, 0) / 1000, callback)
        timer.name = self._name
        timer.daemon = unref
        timer.start()
        return timer

    def cancel(self, handle: object) -> None:
        if isinstance(handle, threading.Timer):
            handle.cancel()

    def __repr__(self) -> str:
        return f"ThreadScheduler({self._name!r})"


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop.

    asyncio has no keep-alive concept for timers, so ``unref`` is ignored.
    Without an explicit loop the running loop is looked up on each call.
    """

    __slots__ = ("_loop",)

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def schedule(self, delay: float, callback: Callable[[], None], *, unref: bool = False) -> asyncio.TimerHandle:
        return self.loop.call_later(max(delay, 0) / 1000, callback)

    def cancel(self, handle: object) -> None:
        if isinstance(handle, asyncio.TimerHandle):
            handle.cancel()

    def __repr__(self) -> str:
        return f"AsyncioScheduler(loop={self._loop!r})"
