"""Pytest configuration and shared fixtures for the test suite."""

import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Generator

import pytest

from datestore import DateStore


class FakeClock:
    """Controllable clock returning aware local datetimes."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture(autouse=True)
def _isolate_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep default store locations inside the test's temporary directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for variable in (
        "DATE_STORE_HOME",
        "DATE_STORE_DIR",
        "DATE_STORE_WRITE_DELAY_MS",
        "DATE_STORE_JSON_INDENT",
    ):
        monkeypatch.delenv(variable, raising=False)


@pytest.fixture
def clock() -> FakeClock:
    """Clock frozen at a whole second so stored values round-trip exactly."""
    return FakeClock(datetime(2024, 3, 1, 12, 0, 0).astimezone())


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "stores" / "test.json"


@pytest.fixture
def store(store_path: Path, clock: FakeClock) -> Generator[DateStore, None, None]:
    """Synchronously-writing store backed by a temporary file.

    Yields:
        DateStore using the fake clock
    """
    s = DateStore(path=store_path, write_delay_ms=0, clock=clock)
    yield s
    s.close()


def _poll(condition: Callable[[], bool], timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


@pytest.fixture
def wait_until() -> Callable[..., bool]:
    """Poll a condition until it holds or the timeout (seconds) passes."""
    return _poll
