"""Shared fixtures: an HttpTransport backed by httpx.MockTransport."""

import json
from typing import Optional

import httpx
import pytest

from restree import HttpTransport


class FakeServer:
    """Answers every request with the queued (status, body) and records what it saw."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status = 200
        self.body: object = None
        self.raw: str = ""
        self.error: Optional[Exception] = None

    def reply(self, status: int = 200, body: object = None, raw: str = "") -> None:
        self.status, self.body, self.raw = status, body, raw

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.body is not None:
            return httpx.Response(self.status, json=self.body)
        return httpx.Response(self.status, text=self.raw)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> object:
        return json.loads(self.last.content) if self.last.content else None


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def transport(server: FakeServer) -> HttpTransport:
    return HttpTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(server.handler)))
