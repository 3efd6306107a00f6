"""Tests for backoff schedule generation."""

from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from retrycase import ConfigurationError, RetryOptions, compute_timeouts, resolve_options
from retrycase.foundation.config import clear_settings_cache


def test_default_schedule() -> None:
    assert compute_timeouts() == [1000, 2000, 4000, 8000, 16000, 32000, 64000, 128000, 256000, 512000]


def test_randomize_with_min_timeout() -> None:
    timeouts = compute_timeouts({"min_timeout": 5000, "randomize": True})

    assert len(timeouts) == 10
    assert timeouts[0] >= 5000
    assert timeouts == sorted(timeouts)


def test_randomize_uses_injected_source() -> None:
    timeouts = compute_timeouts({"retries": 3, "min_timeout": 100, "randomize": True}, random=lambda: 0.5)
    assert timeouts == [150, 300, 600]


def test_explicit_timeouts_are_copied() -> None:
    explicit = [1000, 2000, 3000]
    timeouts = compute_timeouts(explicit)

    assert timeouts == explicit
    assert timeouts is not explicit


def test_explicit_timeouts_are_not_sorted() -> None:
    assert compute_timeouts((300, 100, 200)) == [300, 100, 200]


def test_within_boundaries() -> None:
    for timeout in compute_timeouts({"min_timeout": 1000, "max_timeout": 10000}):
        assert 1000 <= timeout <= 10000


def test_schedule_is_non_decreasing() -> None:
    timeouts = compute_timeouts({"retries": 6, "factor": 3, "min_timeout": 7})
    assert timeouts == sorted(timeouts)


def test_factor_below_one_is_sorted_ascending() -> None:
    assert compute_timeouts({"retries": 3, "factor": 0.5, "min_timeout": 1000}) == [250, 500, 1000]


def test_retries_sets_length() -> None:
    assert len(compute_timeouts({"retries": 2})) == 2


def test_zero_retries_is_empty() -> None:
    assert compute_timeouts({"retries": 0}) == []


def test_clamped_delays_stay_integers() -> None:
    timeouts = compute_timeouts({"retries": 5, "min_timeout": 1, "max_timeout": 10})

    assert timeouts == [1, 2, 4, 8, 10]
    assert all(isinstance(t, int) for t in timeouts)


def test_min_timeout_coerced_to_one() -> None:
    assert compute_timeouts({"retries": 2, "min_timeout": 0}) == [1, 2]


def test_rounds_half_up() -> None:
    # 1, 1.5 -> 2, 2.25 -> 2
    assert compute_timeouts({"retries": 3, "factor": 1.5, "min_timeout": 1}) == [1, 2, 2]


def test_min_timeout_greater_than_max_timeout() -> None:
    with pytest.raises(ConfigurationError, match="min_timeout is greater than max_timeout"):
        compute_timeouts({"min_timeout": 100, "max_timeout": 1})


def test_direct_model_validation_rejects_bad_bounds() -> None:
    with pytest.raises(ValidationError):
        RetryOptions(min_timeout=100, max_timeout=1)


def test_unknown_option_is_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        compute_timeouts({"retires": 3})


def test_negative_retries_is_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        compute_timeouts({"retries": -1})


def test_forever_without_retries_has_single_delay() -> None:
    assert compute_timeouts({"retries": None, "forever": True, "min_timeout": 50, "max_timeout": 50}) == [50]


def test_forever_with_retries_keeps_finite_schedule() -> None:
    assert compute_timeouts({"retries": 3, "forever": True, "min_timeout": 1, "max_timeout": 10}) == [1, 2, 4]


def test_unbounded_retries_normalize_to_forever() -> None:
    opts = resolve_options({"retries": math.inf})

    assert opts.forever is True
    assert opts.retries is None
    assert compute_timeouts(opts) == [1000]


def test_huge_exponent_is_clamped() -> None:
    opts = RetryOptions(retries=1, max_timeout=60000)
    assert opts.delay(5000) == 60000


def test_zero_time_budget_is_unbounded() -> None:
    assert RetryOptions(max_retry_time=0).time_budget == math.inf
    assert RetryOptions(max_retry_time=30).time_budget == 30


def test_defaults_come_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RETRYCASE_RETRY_RETRIES", "3")
    monkeypatch.setenv("RETRYCASE_RETRY_MIN_TIMEOUT", "10")
    clear_settings_cache()

    assert compute_timeouts() == [10, 20, 40]
    assert compute_timeouts({"retries": 1}) == [10]
