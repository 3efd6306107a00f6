"""Value outcome of a retry session, for callers that prefer values over exceptions.

``retry_result`` and ``retry_result_sync`` hand back ``Ok(value)`` when the
operation finished, or ``Err(error)`` carrying the error the session gave up
with. ``Err.unwrap()`` re-raises that error, so a caller can defer the raise.

Examples:
    >>> match await retry_result(fetch, {"retries": 3}):
    ...     case Ok(value=body): handle(body)
    ...     case Err(error=e): log.warning(f"gave up: {e!r}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """The operation returned ``value``."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise RuntimeError(f"unwrap_err() on {self!r}")


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """The session ended with ``error`` (exhausted, timed out, stopped or failed)."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise self.error

    def unwrap_err(self) -> E:
        return self.error


Result = Union[Ok[T], Err[E]]
