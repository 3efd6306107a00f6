"""Testing utilities for code built on retrycase."""

from .scheduler import ManualScheduler, ScheduledCall

__all__ = ["ManualScheduler", "ScheduledCall"]
