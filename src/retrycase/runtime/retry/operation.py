"""Retry state machine.

RetryOperation owns a consumable copy of a delay schedule, an attempt
counter, an error log and a pending timer. The caller's function asks for
another round by calling ``retry(error)``; the operation decides whether one
is allowed and schedules it.

Example:
    >>> op = operation({"retries": 3, "min_timeout": 100})
    >>> def fetch(number: int) -> None:
    ...     try:
    ...         do_request()
    ...     except OSError as e:
    ...         if op.retry(e):
    ...             return
    ...         log.error("giving up", exc_info=op.main_error)
    >>> op.attempt(fetch)
"""

from __future__ import annotations

import logging
import math
import random as _random
import time
from collections.abc import Mapping, Sequence
from enum import StrEnum
from typing import Callable

from retrycase.foundation.errors import RetryTimeoutError

from .backoff import RandomSource, RetryOptions, compute_timeouts, resolve_options
from .scheduler import Scheduler, ThreadScheduler

logger = logging.getLogger("retrycase.retry")

Clock = Callable[[], float]


def monotonic_ms() -> float:
    """Default clock: monotonic time in milliseconds."""
    return time.monotonic() * 1000


class RetryState(StrEnum):
    """Lifecycle of a retry session."""
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"
    TIMED_OUT = "timed_out"
    STOPPED = "stopped"


def _noop(attempt: int) -> None:
    return None


class RetryOperation:
    """Sequential, timer-driven retry session.

    Attempts are numbered from 1. ``attempts`` advances only when a
    scheduled attempt actually fires, not when ``retry()`` is called.

    Two stopping conditions apply independently: the schedule running out
    (``EXHAUSTED``) and the wall-clock budget since ``attempt()`` being spent
    (``TIMED_OUT``). In forever mode the final delay repeats indefinitely, and
    the error that triggered each wraparound is dropped from the log so it
    stays bounded by the length of the finite schedule.

    ``reset()`` restores the attempt counter and schedule only: the error log
    and any pending timer are left as they are, so history carries across
    phases. Stop the operation first for a clean slate.
    """

    __slots__ = (
        "_attempts", "_cached_timeouts", "_errors", "_fn", "_max_retry_time",
        "_operation_start", "_original_timeouts", "_timeouts", "_timer",
        "_unref", "_scheduler", "_clock", "_state",
    )

    def __init__(
        self,
        timeouts: Sequence[int | float],
        *,
        forever: bool = False,
        max_retry_time: float | None = None,
        unref: bool = False,
        scheduler: Scheduler | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._original_timeouts: tuple[int | float, ...] = tuple(timeouts)
        self._timeouts: list[int | float] = list(timeouts)
        self._cached_timeouts: tuple[int | float, ...] | None = self._original_timeouts if forever else None
        self._attempts = 1
        self._errors: list[BaseException] = []
        self._fn: Callable[[int], object] = _noop
        self._max_retry_time = max_retry_time or math.inf
        self._operation_start = 0.0
        self._timer: object | None = None
        self._unref = unref
        self._scheduler = scheduler or ThreadScheduler()
        self._clock = clock or monotonic_ms
        self._state = RetryState.IDLE

    @property
    def timeouts(self) -> tuple[int | float, ...]:
        """Remaining delays (ms), front first."""
        return tuple(self._timeouts)

    @property
    def errors(self) -> tuple[BaseException, ...]:
        """Every error passed to retry(), in call order."""
        return tuple(self._errors)

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def state(self) -> RetryState:
        return self._state

    @property
    def main_error(self) -> BaseException | None:
        """Most frequent error by message; ties go to the most recent leader."""
        main: BaseException | None = None
        main_count = 0
        counts: dict[str, int] = {}
        for error in self._errors:
            message = str(error)
            counts[message] = counts.get(message, 0) + 1
            if counts[message] >= main_count:
                main, main_count = error, counts[message]
        return main

    def reset(self) -> None:
        self._attempts = 1
        self._timeouts = list(self._original_timeouts)

    def stop(self) -> None:
        """Cancel the pending attempt and drop the remaining schedule."""
        if self._timer is not None:
            self._scheduler.cancel(self._timer)
            self._timer = None
        self._timeouts = []
        self._cached_timeouts = None
        self._state = RetryState.STOPPED

    def mark_succeeded(self) -> None:
        """Record that the session ended with a successful attempt."""
        self._state = RetryState.SUCCEEDED

    def retry(self, error: BaseException) -> bool:
        """Record ``error`` and schedule another attempt if one is allowed.

        Returns:
            True if an attempt was scheduled, False if the session is over
        """
        self._errors.append(error)
        if self._clock() - self._operation_start >= self._max_retry_time:
            # Front insertion: the timeout error only wins main_error on a recency tie
            self._errors.insert(0, RetryTimeoutError())
            self._finish(RetryState.TIMED_OUT)
            logger.debug(f"Retry budget of {self._max_retry_time}ms spent after {self._attempts} attempt(s)")
            return False

        if self._timeouts:
            timeout = self._timeouts.pop(0)
        elif self._cached_timeouts:
            # Wraparound errors are not kept
            self._errors.pop()
            timeout = self._cached_timeouts[-1]
        else:
            self._finish(RetryState.EXHAUSTED)
            logger.debug(f"Retry schedule exhausted after {self._attempts} attempt(s)")
            return False

        logger.debug(f"Attempt {self._attempts + 1} scheduled in {timeout}ms ({error!r})")
        self._timer = self._scheduler.schedule(timeout, self._fire, unref=self._unref)
        return True

    def _finish(self, state: RetryState) -> None:
        if self._state is not RetryState.STOPPED:
            self._state = state

    def _fire(self) -> None:
        self._timer = None
        self._attempts += 1
        self._fn(self._attempts)

    def attempt(self, fn: Callable[[int], object]) -> None:
        """Start the session by calling ``fn(attempts)`` synchronously.

        ``fn`` is reused for every scheduled retry. Calling attempt() again
        restarts the time budget.
        """
        self._fn = fn
        self._operation_start = self._clock()
        self._state = RetryState.RUNNING
        fn(self._attempts)

    def __repr__(self) -> str:
        return (
            f"RetryOperation(state={self._state}, attempts={self._attempts}, "
            f"timeouts={list(self._timeouts)}, errors={len(self._errors)})"
        )


def operation(
    options: RetryOptions | Mapping[str, object] | Sequence[int | float] | None = None,
    *,
    scheduler: Scheduler | None = None,
    clock: Clock | None = None,
    random: RandomSource = _random.random,
) -> RetryOperation:
    """Create a RetryOperation from a policy or an explicit delay list.

    Raises:
        ConfigurationError: If the policy is invalid
    """
    if isinstance(options, Sequence) and not isinstance(options, (str, bytes)):
        return RetryOperation(compute_timeouts(options), scheduler=scheduler, clock=clock)

    opts = resolve_options(options)
    return RetryOperation(
        compute_timeouts(opts, random=random),
        forever=opts.forever,
        max_retry_time=opts.time_budget,
        unref=opts.unref,
        scheduler=scheduler,
        clock=clock,
    )
