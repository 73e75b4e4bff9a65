"""
Shared pytest fixtures and configuration for warden tests.

This module provides:
- Logging reset between tests (the CLI reconfigures structlog globally)
- Recording processor, counting factory and an ordered hook event log

Usage:
    Fixtures are auto-discovered by pytest. Use them as function arguments.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import structlog

from tests._support.processors import FactoryCounter, RecordingProcessor

# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(str(item.fspath)).relative_to(Path(__file__).parent)

        if test_path.parts and test_path.parts[0] == "cli":
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Logging isolation
# =============================================================================


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Undo any ``configure_logging()`` done by a test."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)


# =============================================================================
# Processors and recorders
# =============================================================================


@pytest.fixture
def processor() -> RecordingProcessor:
    return RecordingProcessor()


@pytest.fixture
def factory(processor: RecordingProcessor) -> FactoryCounter:
    return FactoryCounter(processor)


@pytest.fixture
def events() -> list[tuple[str, Any]]:
    """Ordered log of hook invocations, appended to by hook callbacks."""
    return []
