import time

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app


def wait_for(predicate, timeout: float = 5.0, interval: float = 0.02):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        value = predicate()
        if value:
            return value
        time.sleep(interval)
    raise AssertionError("condition not met within %.1fs" % timeout)


@pytest.fixture
def fast_settings():
    return Settings(_env_file=None, SCAN_TICK_SECONDS=0.01)


@pytest.fixture
def client(fast_settings):
    with TestClient(create_app(fast_settings)) as c:
        yield c


@pytest.fixture
def slow_client():
    # default half-second cadence, for "still running" assertions
    with TestClient(create_app(Settings(_env_file=None))) as c:
        yield c
