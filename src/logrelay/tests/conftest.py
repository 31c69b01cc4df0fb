"""
Core pytest configuration for the logrelay test suite.

Shared fake transports and factories live in tests/test_fixtures/ and are
registered here so every test module can use them without imports.
"""

from __future__ import annotations

import logging

# -------------------------------
# Early logging tuning
# -------------------------------
# Keep third-party loggers quiet during collection (Faker, asyncio, httpx).
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
    "asyncio",
    "httpx",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

import pytest

from logrelay.core.manager import get_registry


# The process-wide registry outlives a single test; tear it down after each one so
# timers, buffers and loggers never leak between tests.
@pytest.fixture(autouse=True)
async def reset_logging():
    yield
    await get_registry().shutdown()


@pytest.fixture
def message(faker) -> str:
    return faker.sentence()


# Shared transport fixtures
from logrelay.tests.test_fixtures.transport_fixtures import (  # noqa: E402
    recorder,
    failing_transport,
    error_hook,
    entry_factory,
)
