# tests/core/test_http_request_service.py
import asyncio

import aiohttp
import pytest

from fetcher.model import FetchFailure
from fetcher.services.generate_default_user_agent_service import generate_default_user_agent
from fetcher.services.http_request_service import HttpRequestService
from mirror.core.managers.config_manager import config_manager


class FakeResponse:
    """Minimale stand-in voor aiohttp.ClientResponse."""

    def __init__(self, status, body="", headers=None):
        self.status = status
        self.body = body
        self.headers = headers or {"Content-Type": "text/html; charset=utf-8"}

    async def text(self):
        return self.body

    async def read(self):
        return self.body.encode("utf-8")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    closed = False

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requested = []

    def get(self, url):
        self.requested.append(url)
        if self.error:
            raise self.error
        return self.response

    async def close(self):
        self.closed = True


@pytest.fixture
def service():
    return HttpRequestService({"session": {"time_out": 5, "client_read_timeout": 2}}, "TestAgent/1.0")


def test_fetch_page_success(service):
    session = FakeSession(FakeResponse(200, "<html>ok</html>"))
    service.session = session

    page = asyncio.run(service.fetch_page("/buzeni/foo"))

    assert session.requested == ["https://buzerant.com/buzeni/foo"]
    assert page.status_code == 200
    assert page.content == "<html>ok</html>"
    assert page.path == "/buzeni/foo"
    assert page.content_type == "text/html; charset=utf-8"


@pytest.mark.parametrize("status", [301, 404, 500, 503])
def test_fetch_page_non_success_status_raises(service, status):
    service.session = FakeSession(FakeResponse(status))

    with pytest.raises(FetchFailure) as exc_info:
        asyncio.run(service.fetch_page("/missing"))

    assert str(exc_info.value) == f"Failed to fetch: {status}"
    assert exc_info.value.status_code == status
    assert exc_info.value.url == "https://buzerant.com/missing"


def test_fetch_page_client_error_becomes_fetch_failure(service):
    service.session = FakeSession(error=aiohttp.ClientConnectionError("connection refused"))

    with pytest.raises(FetchFailure) as exc_info:
        asyncio.run(service.fetch_page("/"))

    assert "connection refused" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, aiohttp.ClientConnectionError)


def test_fetch_page_timeout_becomes_fetch_failure(service):
    service.session = FakeSession(error=asyncio.TimeoutError())

    with pytest.raises(FetchFailure) as exc_info:
        asyncio.run(service.fetch_page("/"))

    assert "TimeoutError" in str(exc_info.value)


def test_session_sends_user_agent(service):
    async def scenario():
        async with service as http:
            headers = dict(http.session.headers)
        return headers, service.session.closed

    headers, closed = asyncio.run(scenario())
    assert headers["User-Agent"] == "TestAgent/1.0"
    assert closed


def test_user_agent_prefers_configured_value(monkeypatch):
    monkeypatch.setattr(config_manager, "_file_values", {"user_agent": {"value": "Mozilla/5.0 Custom"}})
    assert generate_default_user_agent() == "Mozilla/5.0 Custom"


def test_user_agent_generated_from_platform(monkeypatch):
    monkeypatch.setattr(config_manager, "_file_values", {"user_agent": {"chrome_version": "125.0.0.0"}})
    monkeypatch.setattr("platform.system", lambda: "Linux")

    ua = generate_default_user_agent()
    assert ua.startswith("Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36")
    assert "Chrome/125.0.0.0" in ua
