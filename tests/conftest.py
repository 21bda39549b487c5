"""pytest configuration and fixtures for primavera tests.

This module provides shared fixtures for testing the flow resolver,
including a started EventBridge, an isolated Registry and a Resolver
bound to both.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from primavera import EventBridge, Registry, Resolver


@pytest.fixture(scope="session")
def primavera_module():
    """Provide the primavera module as a fixture."""
    import primavera

    return primavera


@pytest.fixture
def event_bridge() -> Generator[EventBridge, None, None]:
    """Provide a fresh, started EventBridge for each test."""
    from primavera import EventBridge

    EventBridge.reset_instance()
    bridge = EventBridge.instance()
    bridge.start()
    yield bridge
    bridge.stop()
    EventBridge.reset_instance()


@pytest.fixture
def registry(event_bridge: EventBridge) -> Generator[Registry, None, None]:
    """Provide an isolated Registry publishing on the test bridge."""
    from primavera import Registry

    registry = Registry(event_bridge=event_bridge)
    yield registry
    registry.clear()


@pytest.fixture
def resolver(registry: Registry, event_bridge: EventBridge) -> Resolver:
    """Provide a Resolver over the isolated registry."""
    from primavera import Resolver

    return Resolver(registry, event_bridge=event_bridge)


@pytest.fixture
def default_registry() -> Generator[Registry, None, None]:
    """Provide a clean process-wide default Registry.

    Used by the decorator tests, which register against the default.
    """
    from primavera import Registry

    Registry.reset_instance()
    registry = Registry.instance()
    yield registry
    registry.clear()
    Registry.reset_instance()


@pytest.fixture
def primavera_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Capture everything the primavera logger emits, down to TRACE."""
    from primavera.logging import LOGGER_NAME, TRACE

    caplog.set_level(TRACE, logger=LOGGER_NAME)
    return caplog


@pytest.fixture(autouse=True)
def _restore_log_level() -> Generator[None, None, None]:
    """Undo level changes made through primavera.configure()."""
    from primavera.logging import get_logger

    level = get_logger().level
    yield
    get_logger().setLevel(level)


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow running",
    )
