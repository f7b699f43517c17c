from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from dotenv import load_dotenv

# Load the test environment FIRST, before any application imports, so the
# module-level Settings() picks it up.
load_dotenv(dotenv_path=Path(__file__).resolve().parent.parent / ".env.test")

from bmi_ussd.config.settings import settings  # noqa: E402
from bmi_ussd.main import app  # noqa: E402
from bmi_ussd.services.navigator import SessionNavigator  # noqa: E402
from bmi_ussd.services.result_log import InMemoryResultLog  # noqa: E402
from bmi_ussd.services.session_store import InMemorySessionStore  # noqa: E402
from bmi_ussd.services.string_service import StringService  # noqa: E402


class FakeClock:
    """A controllable replacement for utcnow."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc))


@pytest.fixture
def test_settings():
    return settings.model_copy(update={
        "languages": {"1": "rw", "2": "en"},
        "default_language": "en",
        "collect_age": True,
        "exit_token": "00",
        "back_token": "0",
        "history_limit": 3,
        "session_idle_timeout_seconds": 1800,
        "store_timeout_seconds": 2.0,
        "lock_timeout_seconds": 2.0,
    })


@pytest.fixture
def strings(test_settings):
    return StringService(test_settings.languages, test_settings.default_language, test_settings.history_limit)


@pytest.fixture
def store(clock):
    return InMemorySessionStore(1800, clock=clock)


@pytest.fixture
def result_log():
    return InMemoryResultLog()


@pytest.fixture
def navigator(store, result_log, strings, test_settings, clock):
    return SessionNavigator(store, result_log, strings, test_settings, clock)


@pytest.fixture(scope="function")
def test_client():
    """
    Provides a TestClient for API integration tests. The lifespan builds a
    fresh in-memory store and result log for every client.
    """
    with TestClient(app) as client:
        yield client
