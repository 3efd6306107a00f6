"""Exception hierarchy for retry orchestration.

Operation errors supplied by callers are never wrapped: they are recorded
verbatim and re-raised verbatim. The types here only cover failures the
library itself originates.
"""

from __future__ import annotations

# Message carried by the synthetic error injected when the time budget runs out
TIMEOUT_MESSAGE = "RetryOperation timeout occurred"


class RetrycaseError(Exception):
    """Base class for errors raised by retrycase itself."""


class ConfigurationError(RetrycaseError, ValueError):
    """Invalid retry policy, raised before any attempt is made."""


class RetryTimeoutError(RetrycaseError):
    """Cumulative wall-clock budget (max_retry_time) exceeded."""

    def __init__(self, message: str = TIMEOUT_MESSAGE) -> None:
        super().__init__(message)


class UnspecifiedError(RetrycaseError):
    """Placeholder recorded when a retry is requested without an error.

    Has an empty message so error summaries stay well-formed.
    """

    def __init__(self) -> None:
        super().__init__("")
