import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from osinfo.api import create_app
from osinfo.config import Settings
from osinfo.telemetry import RequestTelemetry


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(cpu_sample_seconds=0.0)


@pytest.fixture
def telemetry():
    return RequestTelemetry()


@pytest.fixture
def app(settings, telemetry):
    return create_app(settings, telemetry)


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)
