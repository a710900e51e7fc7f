"""Pytest fixtures for Apex Load Generator tests."""
import logging
import random

import pytest
from fastapi.testclient import TestClient

from apex_load.app import create_app
from apex_load.config import Settings
from apex_load.telemetry import MetricsRecorder, RuntimeProbe, RuntimeReading

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# =============================================================================
# Pytest Marker Registration
# =============================================================================

def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "parser: Range parser tests")
    config.addinivalue_line("markers", "generators: Workload generator tests")
    config.addinivalue_line("markers", "telemetry: Request metrics tests")
    config.addinivalue_line("markers", "api: HTTP endpoint tests")


class FakeProbe(RuntimeProbe):
    """Returns scripted readings, one per call."""

    def __init__(self, readings: list[RuntimeReading]):
        self.readings = list(readings)
        self.calls = 0

    def read(self) -> RuntimeReading:
        reading = self.readings[min(self.calls, len(self.readings) - 1)]
        self.calls += 1
        return reading


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def settings() -> Settings:
    return Settings(random_seed=1234)


@pytest.fixture
def fake_probe() -> FakeProbe:
    return FakeProbe([
        RuntimeReading(allocated_bytes=10_000, tasks=3),
        RuntimeReading(allocated_bytes=4_000, tasks=5),
    ])


@pytest.fixture
def app(settings, rng):
    return create_app(settings, rng=rng, recorder=MetricsRecorder())


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
