"""Shared fixtures for hub tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from core.signal_hub import SignalHub, reset_default_hub


@pytest.fixture
def hub() -> Iterator[SignalHub]:
    signal_hub = SignalHub(settings={"dispatcher": {"thread_name": "test-dispatcher"}})
    yield signal_hub
    signal_hub.stop()
    signal_hub.join(timeout=5.0)


@pytest.fixture(autouse=True)
def _fresh_default_hub() -> Iterator[None]:
    yield
    reset_default_hub()
