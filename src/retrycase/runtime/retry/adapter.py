"""Adapters that run a caller's operation under a RetryOperation.

The operation receives ``(retry, number, operation)`` and opts into another
round by calling ``retry(error)``, usually as ``return retry(error)``. Any
other return value resolves the call, and an exception raised without
requesting a retry propagates immediately, verbatim.

Each attempt's outcome is expressed as a signal:

- Retry(error): the operation asked for another round
- Done(value): the operation finished with a value
- Continue(attempt): the retry was granted and ``attempt`` is scheduled

Example:
    >>> async def fetch(retry, number, operation):
    ...     try:
    ...         return await client.get(url)
    ...     except httpx.TransportError as e:
    ...         return retry(e)
    >>> body = await retry_async(fetch, {"retries": 5, "min_timeout": 200})
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Mapping, Sequence
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Callable, Generic, TypeAlias, TypeVar, Union

from retrycase.foundation.errors import ConfigurationError, Err, Ok, Result, UnspecifiedError

from .backoff import RetryOptions
from .operation import Clock, RetryOperation, operation
from .scheduler import AsyncioScheduler, Scheduler, ThreadScheduler

logger = logging.getLogger("retrycase.retry")

T = TypeVar("T")

Options: TypeAlias = Union[RetryOptions, Mapping[str, object], Sequence[int | float], None]


@dataclass(frozen=True, slots=True)
class Retry:
    error: BaseException


@dataclass(frozen=True, slots=True)
class Done(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Continue:
    attempt: int


Signal = Continue | Retry | Done


class RetrySignal:
    """Callable handed to the operation to request another attempt.

    A request is latched for the attempt it belongs to, so it takes effect
    whether or not the operation returns the Retry value.
    """

    __slots__ = ("_requested",)

    def __init__(self) -> None:
        self._requested: Retry | None = None

    def __call__(self, error: BaseException | None = None) -> Retry:
        self._requested = Retry(UnspecifiedError() if error is None else error)
        return self._requested

    @property
    def requested(self) -> Retry | None:
        return self._requested


RetryFn = Callable[[RetrySignal, int, RetryOperation], Union[T, Awaitable[T], Retry]]


class _Session(Generic[T]):
    """Routes attempt outcomes into the operation and resolves exactly once."""

    __slots__ = ("op", "use_main_error", "_resolve", "_reject")

    def __init__(
        self,
        op: RetryOperation,
        use_main_error: bool,
        resolve: Callable[[T], None],
        reject: Callable[[BaseException], None],
    ) -> None:
        self.op, self.use_main_error = op, use_main_error
        self._resolve, self._reject = resolve, reject

    def reject(self, error: BaseException) -> None:
        """Settle with an error raised outside the retry protocol."""
        self._reject(error)

    def settle(self, number: int, signal: RetrySignal, result: object = None, exc: BaseException | None = None) -> Signal | BaseException:
        step: Signal | BaseException
        if signal.requested is not None:
            step = signal.requested
        elif exc is not None:
            step = exc
        else:
            step = Done(result)

        match step:
            case Retry(error=error):
                if self.op.retry(error):
                    step = Continue(number + 1)
                else:
                    final = (self.op.main_error or error) if self.use_main_error else error
                    logger.info(f"Giving up after {number} attempt(s) ({self.op.state}): {final!r}")
                    self._reject(final)
            case Done(value=value):
                self.op.mark_succeeded()
                self._resolve(value)  # type: ignore[arg-type]
            case BaseException():
                logger.debug(f"Attempt {number} failed without requesting a retry: {step!r}")
                self._reject(step)
        logger.debug(f"Attempt {number} -> {step!r}")
        return step


async def retry_async(
    fn: RetryFn[T],
    options: Options = None,
    *,
    use_main_error: bool = False,
    scheduler: Scheduler | None = None,
    clock: Clock | None = None,
) -> T:
    """Run ``fn`` until it returns, fails without asking to retry, or retries run out.

    ``fn`` may be a plain function or a coroutine function. Cancelling the
    awaiting task stops the operation so nothing else gets scheduled.

    Args:
        fn: Operation called as ``fn(retry, number, operation)``
        options: Policy, explicit delay list (ms), or None for defaults
        use_main_error: Raise ``operation.main_error`` instead of the last error on give-up
        scheduler: Timer implementation (default: running event loop); callbacks
            from other threads are handed back to the loop
        clock: Millisecond clock for the time budget

    Returns:
        The value the operation returned

    Raises:
        ConfigurationError: Invalid policy, before any attempt
        BaseException: The operation's own error
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[T] = loop.create_future()
    op = operation(options, scheduler=scheduler or AsyncioScheduler(loop), clock=clock)
    session: _Session[T] = _Session(
        op, use_main_error,
        resolve=lambda v: None if future.done() else future.set_result(v),
        reject=lambda e: None if future.done() else future.set_exception(e),
    )
    tasks: set[asyncio.Task[None]] = set()

    async def run(number: int) -> None:
        signal = RetrySignal()
        try:
            result = fn(signal, number, op)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            session.settle(number, signal, exc=e)
        except BaseException as e:
            op.stop()
            session.reject(e)
            raise
        else:
            session.settle(number, signal, result)

    def start(number: int) -> None:
        if future.done():
            return
        task = loop.create_task(run(number), name=f"retrycase-attempt-{number}")
        tasks.add(task)
        task.add_done_callback(tasks.discard)

    # Timers may fire off the loop thread (e.g. ThreadScheduler)
    op.attempt(lambda number: loop.call_soon_threadsafe(start, number))
    try:
        return await future
    except asyncio.CancelledError:
        op.stop()
        for task in tasks:
            task.cancel()
        raise


def retry_sync(
    fn: RetryFn[T],
    options: Options = None,
    *,
    use_main_error: bool = False,
    scheduler: Scheduler | None = None,
    clock: Clock | None = None,
) -> T:
    """Blocking version of retry_async for synchronous operations.

    The first attempt runs in the calling thread; later ones run on the
    scheduler's timer threads while the caller waits.

    Raises:
        TypeError: If ``fn`` returns an awaitable (use retry_async)
    """
    future: Future[T] = Future()
    op = operation(options, scheduler=scheduler or ThreadScheduler(), clock=clock)
    session: _Session[T] = _Session(
        op, use_main_error,
        resolve=lambda v: None if future.done() else future.set_result(v),
        reject=lambda e: None if future.done() else future.set_exception(e),
    )

    def run(number: int) -> None:
        signal = RetrySignal()
        try:
            result = fn(signal, number, op)
        except Exception as e:
            session.settle(number, signal, exc=e)
            return
        except BaseException as e:
            op.stop()
            session.reject(e)
            raise
        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            op.stop()
            future.set_exception(TypeError(f"{fn!r} returned an awaitable; use retry_async for async operations"))
            return
        session.settle(number, signal, result)

    op.attempt(run)
    try:
        return future.result()
    except KeyboardInterrupt:
        op.stop()
        raise


async def retry_result(fn: RetryFn[T], options: Options = None, **kwargs: object) -> Result[T, BaseException]:
    """Like retry_async, but returns Ok(value) or Err(error) instead of raising.

    Configuration errors are still raised.
    """
    try:
        return Ok(await retry_async(fn, options, **kwargs))  # type: ignore[arg-type]
    except ConfigurationError:
        raise
    except Exception as e:
        return Err(e)


def retry_result_sync(fn: RetryFn[T], options: Options = None, **kwargs: object) -> Result[T, BaseException]:
    """Like retry_sync, but returns Ok(value) or Err(error) instead of raising."""
    try:
        return Ok(retry_sync(fn, options, **kwargs))  # type: ignore[arg-type]
    except ConfigurationError:
        raise
    except Exception as e:
        return Err(e)
