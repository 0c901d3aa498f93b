from datetime import datetime, timedelta, timezone

import pytest

from sitecms import create_app

EDITOR = "editor@example.com"
ACCESS_HEADER = "cf-access-authenticated-user-email"


class FakeClock:
    """Stands in for utcnow(); every call returns a time one second later."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        yield app


@pytest.fixture
def store(app):
    return app.extensions["storage"]


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers():
    return {ACCESS_HEADER: EDITOR}


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock(datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc))
    monkeypatch.setattr("sitecms.application.cms.create_version.utcnow", fake)
    return fake
