"""Foundation - errors, configuration and testing helpers for retrycase."""

from __future__ import annotations

__all__ = [
    # Errors
    "RetrycaseError", "ConfigurationError", "RetryTimeoutError", "UnspecifiedError",
    "Result", "Ok", "Err",
    # Config
    "RetrycaseSettings", "RetrySettings", "LoggingSettings", "get_settings", "clear_settings_cache",
    # Testing
    "ManualScheduler", "ScheduledCall",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("RetrycaseError", "ConfigurationError", "RetryTimeoutError", "UnspecifiedError",
                "Result", "Ok", "Err"):
        from . import errors
        return getattr(errors, name)

    if name in ("RetrycaseSettings", "RetrySettings", "LoggingSettings", "get_settings", "clear_settings_cache"):
        from . import config
        return getattr(config, name)

    if name in ("ManualScheduler", "ScheduledCall"):
        from . import testing
        return getattr(testing, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
