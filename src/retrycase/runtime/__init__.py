"""Runtime - retry execution and observability."""

from .observability import configure_logging
from .retry import (
    AsyncioScheduler,
    Continue,
    Done,
    Retry,
    RetryOperation,
    RetryOptions,
    RetrySignal,
    RetryState,
    Scheduler,
    Signal,
    ThreadScheduler,
    compute_timeouts,
    operation,
    resolve_options,
    retry_async,
    retry_result,
    retry_result_sync,
    retry_sync,
)

__all__ = [
    "configure_logging",
    "AsyncioScheduler",
    "Continue",
    "Done",
    "Retry",
    "RetryOperation",
    "RetryOptions",
    "RetrySignal",
    "RetryState",
    "Scheduler",
    "Signal",
    "ThreadScheduler",
    "compute_timeouts",
    "operation",
    "resolve_options",
    "retry_async",
    "retry_result",
    "retry_result_sync",
    "retry_sync",
]
