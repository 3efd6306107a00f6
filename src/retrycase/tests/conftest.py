"""Shared fixtures for retrycase tests."""

from __future__ import annotations

import os

import pytest

from retrycase.foundation.config import clear_settings_cache
from retrycase.foundation.testing import ManualScheduler


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> object:
    """Isolate each test from RETRYCASE_* environment and cached settings."""
    for key in list(os.environ):
        if key.startswith("RETRYCASE_"):
            monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def sched() -> ManualScheduler:
    return ManualScheduler()
