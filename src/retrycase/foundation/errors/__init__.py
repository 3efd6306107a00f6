"""Error handling for retrycase.

- RetrycaseError and subclasses: failures the library originates
- Result/Ok/Err: value-based outcome for non-raising entry points
"""

from .errors import (
    TIMEOUT_MESSAGE,
    ConfigurationError,
    RetrycaseError,
    RetryTimeoutError,
    UnspecifiedError,
)
from .result import Err, Ok, Result

__all__ = [
    "TIMEOUT_MESSAGE",
    "ConfigurationError",
    "RetrycaseError",
    "RetryTimeoutError",
    "UnspecifiedError",
    "Result",
    "Ok",
    "Err",
]
