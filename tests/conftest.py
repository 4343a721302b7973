from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx
import pytest

from nodeswitch import Settings, VersionParser

if TYPE_CHECKING:
    from pathlib import Path

REMOTES = {
    "default": "test1",
    "test1": "http://example.com/test1",
    "test2": "http://example.com/test2",
}


@dataclass
class Route:
    status: int = 200
    body: object = None
    text: str | None = None
    etag: str | None = None
    error: Exception | None = None


@dataclass
class FakeServer:
    """Serves canned responses to an :class:`httpx.AsyncClient` through a mock transport."""

    routes: dict[str, Route] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def add(self, url: str, body: object = None, **kwargs: object) -> None:
        self.routes[url] = Route(body=body, **kwargs)  # type: ignore[arg-type]

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        await asyncio.sleep(0.01)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, text="Not Found")
        if route.error is not None:
            raise route.error
        headers = {"ETag": route.etag} if route.etag else {}
        if route.etag and request.headers.get("If-None-Match") == route.etag:
            return httpx.Response(304, headers=headers)
        if route.text is not None:
            return httpx.Response(route.status, text=route.text, headers=headers)
        return httpx.Response(route.status, json=route.body, headers=headers)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handle))


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def home(tmp_path: Path) -> Path:
    return tmp_path / "nvs"


@pytest.fixture
def settings(home: Path) -> Settings:
    return Settings(home=home, remotes=dict(REMOTES))


@pytest.fixture
def parser(settings: Settings) -> VersionParser:
    return VersionParser(settings.remotes, settings.aliases, host_os="linux")
