"""Shared fixtures for all tests."""

import json

import httpx
import pytest
import structlog

from agent_platform_sdk.client import AgentPlatformClient
from agent_platform_sdk.config import ClientOptions

BASE_URL = "https://api.test/v1"


def envelope(data=None, next_cursor=None, message="ok"):
    body = {
        "success": True,
        "data": data,
        "message": message,
        "timestamp": "2024-01-01T00:00:00Z",
        "requestId": "req_1",
    }
    if next_cursor is not None:
        body["nextCursor"] = next_cursor
    return body


def error_envelope(code, message="failed", details=None):
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {
        "success": False,
        "error": error,
        "timestamp": "2024-01-01T00:00:00Z",
        "requestId": "req_err",
    }


class FakeAPI:
    """Scripted HTTP backend: queue responses per (method, path), record requests."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, *responses):
        """Queue responses; the last one repeats. Each is (status, body[, headers]), a callable or an exception."""
        self.routes.setdefault((method, "/v1" + path), []).extend(responses)

    def handler(self, request):
        self.requests.append(request)
        key = (request.method, request.url.path)
        queue = self.routes.get(key)
        if not queue:
            return httpx.Response(404, json=error_envelope("NOT_FOUND", f"no route {key}"))
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        if callable(item):
            return item(request)
        status, body, *rest = item
        headers = rest[0] if rest else {}
        return httpx.Response(status, json=body, headers=headers)

    def json_body(self, index=-1):
        return json.loads(self.requests[index].content)

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)


class FakeTime:
    """Clock that only moves when ``sleep`` is called."""

    def __init__(self, sleeps):
        self.now = 0.0
        self.sleeps = sleeps

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    structlog.reset_defaults()


@pytest.fixture
def api():
    return FakeAPI()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def fake_time(sleeps):
    return FakeTime(sleeps)


@pytest.fixture
def make_client(api, fake_time):
    created = []

    def _make(**kwargs):
        kwargs.setdefault("api_key", "ak_test")
        kwargs.setdefault("base_url", BASE_URL)
        options = kwargs.pop("options", None)
        client = AgentPlatformClient(
            options,
            transport=api.transport,
            sleep=fake_time.sleep,
            clock=fake_time,
            **kwargs,
        )
        created.append(client)
        return client

    yield _make
    for c in created:
        c.close()


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def options():
    return ClientOptions(api_key="ak_test", base_url=BASE_URL)
