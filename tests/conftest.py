import pytest
import requests

from osrmtable.config import ServerConfig, reset_server
from osrmtable.osrm_client import OSRMClient, TRANSPORT_FAILURES
from osrmtable.retry import RetryPolicy

DEMO_URL = "http://router.project-osrm.org/"
LOCAL_URL = "http://localhost:5000/"


class FakeResponse:
    """Stands in for requests.Response: json() returns the payload or raises like a bad body."""
    def __init__(self, payload=None, status_code=200, body_is_json=True):
        self.payload = payload
        self.status_code = status_code
        self.body_is_json = body_is_json

    def json(self):
        if not self.body_is_json:
            raise requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0)
        return self.payload


class FakeSession:
    """
    Replays a script of outcomes, one per GET: an exception instance is raised,
    anything else is returned. Records every URL requested.
    """
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.headers = {}
        self.calls = []
        self.request_headers = []
        self.closed = False

    def get(self, url, headers=None, timeout=None):
        self.calls.append(url)
        self.request_headers.append(headers or {})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def close(self):
        self.closed = True


class RecordingSleep:
    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture(autouse=True)
def clean_server_config(monkeypatch):
    for name in ("OSRM_SERVER", "OSRM_PROFILE", "OSRM_TIMEOUT", "OSRM_MAX_TABLE_CELLS", "OSRM_MAX_URL_LENGTH"):
        monkeypatch.delenv(name, raising=False)
    reset_server()
    yield
    reset_server()


@pytest.fixture
def demo_server():
    return ServerConfig(base_url=DEMO_URL)


@pytest.fixture
def local_server():
    return ServerConfig(base_url=LOCAL_URL)


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def make_client(sleep):
    """Build an OSRMClient on a FakeSession that never really sleeps."""
    def _make(outcomes, server=None):
        session = FakeSession(outcomes)
        client = OSRMClient(
            server=server or ServerConfig(base_url=LOCAL_URL),
            retry_policy=RetryPolicy(max_attempts=10, delay_s=1.0, retry_on=TRANSPORT_FAILURES, sleep=sleep),
            session=session,
        )
        return client, session
    return _make
