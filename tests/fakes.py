# File: tests/fakes.py
"""Тестовые двойники aiohttp-сессии и генераторы sitemap/HTML."""
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Union


Route = Union["FakeResponse", BaseException]


class FakeResponse:
    """Минимальная замена aiohttp.ClientResponse для `async with session.get(...)`."""

    def __init__(
        self,
        body: Union[str, bytes] = b"",
        status: int = 200,
        content_type: str = "text/html; charset=utf-8",
    ) -> None:
        self.body = body.encode("utf-8") if isinstance(body, str) else body
        self.status = status
        self.headers = {"Content-Type": content_type}

    async def __aenter__(self) -> FakeResponse:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def read(self) -> bytes:
        return self.body

    async def text(self, encoding: Optional[str] = None, errors: str = "strict") -> str:
        return self.body.decode(encoding or "utf-8", errors=errors)


class FakeSession:
    """
    Сессия с заранее заданными ответами по точному URL.

    Неизвестные адреса отвечают 404; если маршрут является исключением, оно
    выбрасывается при запросе. Все запросы записываются в ``calls``.
    """

    def __init__(self, routes: Optional[Dict[str, Route]] = None) -> None:
        self.routes: Dict[str, Route] = dict(routes or {})
        self.calls: List[str] = []
        self.kwargs: List[Dict[str, Any]] = []
        self.closed = False

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append(url)
        self.kwargs.append(kwargs)
        route = self.routes.get(url)
        if route is None:
            return FakeResponse("", status=404)
        if isinstance(route, BaseException):
            raise route
        return route

    async def close(self) -> None:
        self.closed = True


class _InFlight:
    """Обёртка ответа, которая держит счётчик открытых запросов сессии."""

    def __init__(self, session: CountingSession, response: FakeResponse) -> None:
        self.session = session
        self.response = response

    async def __aenter__(self) -> FakeResponse:
        self.session.in_flight += 1
        self.session.max_in_flight = max(self.session.max_in_flight, self.session.in_flight)
        await asyncio.sleep(self.session.delay)
        return await self.response.__aenter__()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.session.in_flight -= 1


class CountingSession(FakeSession):
    """FakeSession с задержкой ответа; запоминает пик одновременных запросов."""

    def __init__(self, routes: Optional[Dict[str, Route]] = None, delay: float = 0.05) -> None:
        super().__init__(routes)
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0

    def get(self, url: str, **kwargs: Any) -> _InFlight:  # type: ignore[override]
        return _InFlight(self, super().get(url, **kwargs))


def html_page(title: str = "", links: Optional[List[str]] = None, body: str = "") -> FakeResponse:
    anchors = "".join(f'<a href="{href}">{href}</a>' for href in links or [])
    return FakeResponse(f"<html><head><title>{title}</title></head><body>{body}{anchors}</body></html>")


def urlset_xml(urls: List[Union[str, tuple]]) -> str:
    items = []
    for item in urls:
        if isinstance(item, tuple):
            loc, priority = item
            items.append(f"<url><loc>{loc}</loc><priority>{priority}</priority></url>")
        else:
            items.append(f"<url><loc>{item}</loc></url>")
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">' + "".join(items) + "</urlset>"
    )


def index_xml(sitemaps: List[str]) -> str:
    items = "".join(f"<sitemap><loc>{loc}</loc></sitemap>" for loc in sitemaps)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">' + items + "</sitemapindex>"
    )


def xml_response(body: str, status: int = 200) -> FakeResponse:
    return FakeResponse(body, status=status, content_type="application/xml")


