import os
from datetime import date, datetime, time, timedelta, timezone

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

from BackEnd.repos.session_repo import SessionStore
from BackEnd.services.aggregation import Aggregator
from BackEnd.services.notifier import Notifier
from BackEnd.services.shared_storage import SharedStorage
from BackEnd.services.timer_service import TimerService

TODAY = date(2026, 3, 10)


class FakeClock:
    """Both time sources advance together, starting at 10:00 local on TODAY."""

    def __init__(self, day: date = TODAY) -> None:
        local_start = datetime.combine(day, time(10, 0)).astimezone()
        self.base = local_start.astimezone(timezone.utc)
        self.offset = 0.0

    def now(self) -> datetime:
        return self.base + timedelta(seconds=self.offset)

    def monotonic(self) -> float:
        return 1000.0 + self.offset

    def set(self, seconds: float) -> None:
        self.offset = float(seconds)

    def advance(self, seconds: float) -> None:
        self.offset += seconds


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store():
    db = SessionStore(":memory:")
    yield db
    db.close()


@pytest.fixture
def shared(tmp_path) -> SharedStorage:
    return SharedStorage(tmp_path / "shared-container")


@pytest.fixture
def aggregator(store, shared, clock) -> Aggregator:
    shared.container.mkdir()
    return Aggregator(store, shared, clock)


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def timer(store, aggregator, notifier, clock) -> TimerService:
    service = TimerService(store, aggregator, notifier, clock, target_duration=60, timer_enabled=True)
    yield service
    service.shutdown()
