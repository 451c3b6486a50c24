import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="signage-tests-")
os.environ["SIGNAGE_DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["SIGNAGE_STORAGE_DIR"] = os.path.join(_TMP_DIR, "storage")
os.environ.pop("SIGNAGE_API_KEY", None)
os.environ.pop("SIGNAGE_SCHEDULE_TIMEZONE", None)

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from signage.api.deps import get_clock
from signage.db import Base, SessionLocal, engine
from signage.main import app

ACCOUNT = "acct-1"
OTHER_ACCOUNT = "acct-2"

# 2026-10-19 is a Monday (weekday 1 with Sunday=0).
MONDAY = datetime(2026, 10, 19)


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def db_session():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    frozen = FrozenClock(MONDAY.replace(hour=11))
    app.dependency_overrides[get_clock] = lambda: frozen
    yield frozen
    app.dependency_overrides.pop(get_clock, None)


@pytest.fixture
def client(db_session, clock):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict:
    return {"X-Account-ID": ACCOUNT}


@pytest.fixture
def paired_screen(client, auth_headers) -> dict:
    registered = client.post("/screens/register").json()
    response = client.post(
        "/screens/pair",
        json={"code": registered["pairing_code"].lower(), "name": "Lobby"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    return {"id": registered["screen_id"], "token": registered["screen_token"]}
