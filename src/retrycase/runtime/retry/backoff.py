"""Backoff schedule generation.

Turns a declarative retry policy into an ordered list of delays (ms):

    delay(i) = min(round(random_factor * max(min_timeout, 1) * factor ** i), max_timeout)

where random_factor is ``1 + random()`` when ``randomize`` is set, else 1.
Generated schedules are sorted ascending since a factor below one or
randomization can otherwise produce a shrinking sequence. Explicit delay
lists are trusted and copied verbatim.

Example:
    >>> compute_timeouts({"retries": 3, "factor": 0.5, "min_timeout": 1000})
    [250, 500, 1000]
    >>> compute_timeouts([1000, 2000, 3000])
    [1000, 2000, 3000]
"""

from __future__ import annotations

import math
import random as _random
from collections.abc import Mapping, Sequence
from typing import Annotated, Callable, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from retrycase.foundation.config import get_settings
from retrycase.foundation.errors import ConfigurationError

RandomSource: TypeAlias = Callable[[], float]


class RetryOptions(BaseModel):
    """Retry policy. All times are in milliseconds.

    Attributes:
        retries: Number of precomputed delays (None = no finite schedule)
        factor: Exponential growth base per attempt index
        min_timeout: Lower delay bound (coerced to at least 1 in the formula)
        max_timeout: Upper delay bound
        randomize: Multiply each delay by 1 + random()
        forever: Repeat the final delay once the schedule is exhausted
        max_retry_time: Wall-clock budget across attempt gaps (None/0 = unbounded)
        unref: Pending timers must not keep the process alive
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        json_schema_extra={
            "title": "Retry Options",
            "description": "Backoff schedule and stopping conditions",
            "examples": [{"retries": 5, "factor": 2, "min_timeout": 100, "max_timeout": 5000}],
        },
    )

    retries: Annotated[int, Field(ge=0)] | None = 10
    factor: Annotated[float, Field(ge=0)] = 2.0
    min_timeout: Annotated[float, Field(ge=0)] = 1000.0
    max_timeout: Annotated[float, Field(ge=0)] = math.inf
    randomize: bool = False
    forever: bool = False
    max_retry_time: Annotated[float, Field(ge=0)] | None = None
    unref: bool = False

    @model_validator(mode="before")
    @classmethod
    def _normalize_unbounded(cls, data: object) -> object:
        """retries=inf means retry forever with no finite schedule."""
        if isinstance(data, Mapping) and data.get("retries") == math.inf:
            return {**data, "retries": None, "forever": True}
        return data

    @model_validator(mode="after")
    def _check_bounds(self) -> RetryOptions:
        if self.min_timeout > self.max_timeout:
            raise ValueError("min_timeout is greater than max_timeout")
        return self

    @property
    def time_budget(self) -> float:
        """Effective max_retry_time; an unset or zero budget is unbounded."""
        return self.max_retry_time or math.inf

    def delay(self, attempt: int, random: RandomSource = _random.random) -> int | float:
        """Delay in ms before the retry following 0-indexed ``attempt``."""
        random_factor = 1 + random() if self.randomize else 1
        try:
            raw = random_factor * max(self.min_timeout, 1) * self.factor ** attempt
        except OverflowError:
            raw = math.inf
        return _as_int(min(_round_half_up(raw), self.max_timeout))


def _round_half_up(value: float) -> int | float:
    return math.floor(value + 0.5) if math.isfinite(value) else value


def _as_int(value: int | float) -> int | float:
    return int(value) if math.isfinite(value) and value == int(value) else value


def resolve_options(options: RetryOptions | Mapping[str, object] | None = None) -> RetryOptions:
    """Validate options, filling unset keys from settings defaults.

    Raises:
        ConfigurationError: If the merged policy is invalid
    """
    if isinstance(options, RetryOptions):
        return options
    merged = {**get_settings().retry.policy_defaults(), **(options or {})}
    try:
        return RetryOptions.model_validate(merged)
    except ValidationError as e:
        raise ConfigurationError(_describe(e)) from e


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    msg = str(first.get("msg", exc))
    return msg.removeprefix("Value error, ")


def compute_timeouts(
    options: RetryOptions | Mapping[str, object] | Sequence[int | float] | None = None,
    *,
    random: RandomSource = _random.random,
) -> list[int | float]:
    """Compute the delay schedule for a policy or copy an explicit one.

    Args:
        options: Policy (model or mapping), explicit delay list, or None for defaults
        random: Random source in [0, 1) used when ``randomize`` is set

    Returns:
        New list of delays in milliseconds

    Raises:
        ConfigurationError: If min_timeout exceeds max_timeout or a value is invalid
    """
    if isinstance(options, Sequence) and not isinstance(options, (str, bytes)):
        return list(options)

    opts = resolve_options(options)
    timeouts = [opts.delay(i, random) for i in range(opts.retries or 0)]
    if opts.forever and not timeouts:
        timeouts.append(opts.delay(0, random))
    timeouts.sort()
    return timeouts
