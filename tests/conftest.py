"""Test fixtures: a URL router for httpx.MockTransport and a fake clock."""
from typing import Callable, Dict, List, Union

import httpx
import pytest

Responder = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


class Router:
    """Maps URLs to canned responses.

    A route matches the full URL first, then the URL without its query string.
    Unknown URLs get a 404. Every request is recorded in `calls`.
    """

    def __init__(self):
        self.routes: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.calls: List[httpx.Request] = []

    def add(self, url: str, status: int = 200, json=None, text: str = None, raises: Exception = None,
            handler: Callable[[httpx.Request], httpx.Response] = None) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if raises is not None:
                raise raises
            if handler is not None:
                return handler(request)
            if text is not None:
                return httpx.Response(status, text=text)
            return httpx.Response(status, json=json)
        self.routes[url] = respond

    def hits(self, prefix: str) -> int:
        return sum(1 for r in self.calls if str(r.url).startswith(prefix))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        full = str(request.url)
        bare = full.split("?", 1)[0]
        for key in (full, bare):
            if key in self.routes:
                return self.routes[key](request)
        return httpx.Response(404, json={"error": "not found"})


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def router() -> Router:
    return Router()


@pytest.fixture
def http(router) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(router))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
