"""
Pytest configuration and fixtures.
"""

import os
import sys
import uuid
from pathlib import Path

import pytest
from mongomock_motor import AsyncMongoMockClient

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from docstore.storage.mongodb import MongoStore  # noqa: E402


class FakeClock:
    """Deterministic Unix-seconds clock for timestamp assertions."""

    def __init__(self, start: int = 1_700_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int = 1) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mongo_client():
    """In-memory Motor-compatible client; no server required."""
    return AsyncMongoMockClient()


@pytest.fixture
def store(mongo_client, clock):
    """MongoStore over a fresh mock database."""
    return MongoStore(mongo_client, f"test_{uuid.uuid4().hex[:8]}", clock=clock)


@pytest.fixture
def restore_logging():
    """Undo global structlog and driver logger changes after the test."""
    import logging

    import structlog

    from docstore.logging import DRIVER_LOGGERS

    saved = {}
    for name in DRIVER_LOGGERS:
        driver_logger = logging.getLogger(name)
        saved[name] = (driver_logger.handlers[:], driver_logger.level, driver_logger.propagate)
    yield
    structlog.reset_defaults()
    for name, (handlers, level, propagate) in saved.items():
        driver_logger = logging.getLogger(name)
        driver_logger.handlers[:] = handlers
        driver_logger.setLevel(level)
        driver_logger.propagate = propagate
