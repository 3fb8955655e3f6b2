import os
import time

import pytest

from filetail.loop import TickLoop
from filetail.position import PositionTracker


@pytest.fixture(autouse=True)
def clean_tail_env(monkeypatch):
    """Keep TAIL_* variables from the outer environment out of config tests."""
    for name in list(os.environ):
        if name.startswith("TAIL_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def loop():
    return TickLoop()


@pytest.fixture
def tracker():
    return PositionTracker()


@pytest.fixture
def log_file(tmp_path):
    path = tmp_path / "app.log"
    path.write_bytes(b"")
    return path


def wait_for(predicate, timeout: float = 5.0, interval: float = 0.02) -> bool:
    """Poll ``predicate`` until it is truthy or ``timeout`` elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()
