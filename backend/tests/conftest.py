import os
import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ["APP_ENV"] = "test"
os.environ["ADMIN_PASSWORD"] = "admin1234"

from lottery import db  # noqa: E402
from lottery.constants import ActivityState  # noqa: E402

ADMIN_HEADERS = {"x-admin-password": "admin1234"}


class FakeClock:
    """Manually advanced clock for store / round cache tests."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(20260101)


@pytest.fixture
def coordinator(clock, rng):
    """Coordinator with an open activity, one winning tile and a small PID ring."""
    return db.build_coordinator(
        max_pid=50,
        red_count=1,
        ttl_seconds=300,
        state=ActivityState.OPEN,
        rng=rng,
        clock=clock,
    )


@pytest.fixture(autouse=True)
def _reset_lottery_state():
    """Every test starts from an empty process-wide state."""
    db.close_state()
    yield
    db.close_state()


@pytest.fixture
def client():
    from lottery.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_headers():
    return dict(ADMIN_HEADERS)


@pytest.fixture
def open_activity(client, admin_headers):
    resp = client.post("/api/admin/state", json={"state": "open"}, headers=admin_headers)
    assert resp.status_code == 200
    return resp
