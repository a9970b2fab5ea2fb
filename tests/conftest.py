"""Shared fixtures: a recording httpx MockTransport."""

import httpx
import pytest

from fetchserp import FetchSerpClient


class Recorder:
    """Collects requests and answers each one with a canned response."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.json = {"data": "ok"}
        self.text = None
        self.headers = None

    def respond(self, status_code=200, json=None, text=None, headers=None):
        self.status_code = status_code
        self.json = json
        self.text = text
        self.headers = headers

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(
                self.status_code,
                text=self.text,
                headers=self.headers or {"content-type": "text/plain"},
            )
        return httpx.Response(self.status_code, json=self.json, headers=self.headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def calls(self) -> int:
        return len(self.requests)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def client(recorder, monkeypatch):
    """Client wired to the recorder instead of the network."""
    monkeypatch.delenv("FETCHSERP_API_KEY", raising=False)
    return FetchSerpClient(
        api_key="test_key_123",
        base_url="https://api.test",
        transport=recorder.transport,
    )


@pytest.fixture(autouse=True)
def clean_connection_env(monkeypatch):
    """Keep a developer's FETCHSERP_BASE_URL/TIMEOUT out of the tests."""
    monkeypatch.delenv("FETCHSERP_BASE_URL", raising=False)
    monkeypatch.delenv("FETCHSERP_TIMEOUT", raising=False)
