"""Shared fixtures."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import pytest

from storefront.config import PollingPolicy
from storefront.polling import PaymentPollingEngine, VirtualClock
from tests.fakes import RecordingListener


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()


@pytest.fixture
def policy() -> PollingPolicy:
    return PollingPolicy()


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
async def engines() -> AsyncIterator[list[PaymentPollingEngine]]:
    """Engines registered here are stopped when the test ends."""
    created: list[PaymentPollingEngine] = []
    yield created
    for engine in created:
        engine.stop()
    await asyncio.sleep(0)
