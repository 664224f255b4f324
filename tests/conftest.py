"""
Pytest configuration and fixtures
"""
from typing import Any, Dict, List, Optional

import pytest

from gtasks.integrations.google_tasks.client import TasksClient
from gtasks.integrations.google_tasks.http import TransportResponse


class FakeTokenProvider:
    """Token collaborator double: records calls, hands out a fixed token."""

    def __init__(self, configured: bool = True, token: str = "test-token", error: Optional[Exception] = None):
        self.configured = configured
        self.token = token
        self.error = error
        self.configure_calls: List[Any] = []
        self.token_requests = 0

    def configure(self, options):
        self.configure_calls.append(options)

    def to_json(self) -> Dict[str, Any]:
        return {"configured": self.configured}

    async def get_access_token(self) -> str:
        self.token_requests += 1
        if self.error:
            raise self.error
        return self.token


class FakeTransport:
    """JSON transport double: records requests, replays queued responses."""

    def __init__(self, *responses: TransportResponse):
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def queue(self, response: TransportResponse) -> None:
        self.responses.append(response)

    async def json(self, url, method="GET", headers=None, body_obj=None, debug=False):
        self.calls.append({
            "url": url,
            "method": method,
            "headers": headers,
            "body_obj": body_obj,
            "debug": debug,
        })
        if self.responses:
            return self.responses.pop(0)
        return TransportResponse(status=200, json={})

    async def close(self):
        self.closed = True

    @property
    def last(self) -> Dict[str, Any]:
        return self.calls[-1]


@pytest.fixture
def token_provider():
    return FakeTokenProvider()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(token_provider, transport):
    """TasksClient wired to fakes, default base URL and user id."""
    return TasksClient(token_provider=token_provider, transport=transport)


@pytest.fixture(autouse=True)
def clean_tasks_env(monkeypatch, tmp_path):
    """Keep developer GOOGLE_TASKS_* settings and .env files out of tests."""
    for name in [
        "GOOGLE_TASKS_CONFIG", "GOOGLE_TASKS_BASE_URL", "GOOGLE_TASKS_USER_ID",
        "GOOGLE_TASKS_CLIENT_ID", "GOOGLE_CLIENT_ID",
        "GOOGLE_TASKS_CLIENT_SECRET", "GOOGLE_CLIENT_SECRET",
        "GOOGLE_TASKS_REFRESH_TOKEN", "GOOGLE_REFRESH_TOKEN",
        "GOOGLE_TASKS_ACCESS_TOKEN", "GOOGLE_TASKS_TOKEN_URI",
        "GOOGLE_TASKS_SCOPES", "GOOGLE_TASKS_TIMEOUT",
        "GOOGLE_TASKS_LOG_LEVEL", "LOG_LEVEL",
    ]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
