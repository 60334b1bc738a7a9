"""Shared fixtures: sample provider payloads, a fake news provider and gateway doubles."""
import asyncio
from typing import Any, Optional, Union

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from newswave.models.article import Article
from newswave.services.news_api_service import BaseNewsService, NewsApiError


def make_article(title: Optional[str], /, **overrides: Any) -> dict[str, Any]:
    """Build a provider-shaped article dictionary."""
    article = {
        "source": {"id": None, "name": "Example Times"},
        "author": "Jane Reporter",
        "title": title,
        "description": f"Summary of {title}",
        "url": f"https://example.com/{(title or 'untitled').lower().replace(' ', '-')}",
        "urlToImage": None,
        "publishedAt": "2025-03-05T14:30:00Z",
        "content": f"Full text of {title}",
    }
    article.update(overrides)
    return article


def make_payload(articles: list[dict[str, Any]], status: str = "ok") -> dict[str, Any]:
    return {"status": status, "totalResults": len(articles), "articles": articles}


class FakeProvider:
    """In-process stand-in for the news provider's top-headlines endpoint."""

    def __init__(self):
        self.requests: list[dict[str, str]] = []
        self.status = 200
        self.payload: dict[str, Any] = make_payload(
            [make_article("Market Rally"), make_article("[Removed]"), make_article("New Phone Launch")]
        )
        self.raw_body: Optional[Union[str, bytes]] = None
        self.delay = 0.0

    async def handle(self, request: web.Request) -> web.Response:
        self.requests.append(dict(request.query))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.raw_body is not None:
            body = self.raw_body.encode("utf-8") if isinstance(self.raw_body, str) else self.raw_body
            return web.Response(status=self.status, body=body, content_type="application/json")
        return web.json_response(self.payload, status=self.status)

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/v2/top-headlines", self.handle)
        return app


class StaticNewsService(BaseNewsService):
    """Gateway double returning fixed articles or raising a fixed error."""

    def __init__(self, articles: Optional[list[Article]] = None, error: Optional[NewsApiError] = None):
        super().__init__()
        self.articles = articles or []
        self.error = error
        self.calls: list[str] = []

    async def fetch_top_headlines(self, category):
        self.calls.append(str(category))
        if self.error is not None:
            raise self.error
        return list(self.articles)


class ControlledNewsService(BaseNewsService):
    """Gateway double whose responses are released by the test, in any order."""

    def __init__(self):
        super().__init__()
        self.calls: list[str] = []
        self._pending: dict[str, asyncio.Future] = {}

    async def fetch_top_headlines(self, category):
        category = str(category)
        self.calls.append(category)
        future = asyncio.get_running_loop().create_future()
        self._pending[category] = future
        return await future

    async def wait_for_call(self, category: str) -> None:
        while category not in self._pending:
            await asyncio.sleep(0)

    def resolve(self, category: str, articles: list[Article]) -> None:
        self._pending.pop(category).set_result(articles)

    def fail(self, category: str, error: Exception) -> None:
        self._pending.pop(category).set_exception(error)


@pytest.fixture()
def article_factory():
    """Factory for provider article dictionaries."""
    return make_article


@pytest.fixture()
def payload_factory():
    """Factory for provider response payloads."""
    return make_payload


@pytest.fixture()
def sample_articles() -> list[Article]:
    """Working set used across controller and view tests."""
    return [
        Article.from_dict(make_article("Market Rally")),
        Article.from_dict(make_article("New Phone Launch")),
        Article.from_dict(make_article("Phone Makers Merge", author=None)),
    ]


@pytest.fixture()
def static_service_factory():
    return StaticNewsService


@pytest.fixture()
def controlled_service() -> ControlledNewsService:
    return ControlledNewsService()


@pytest.fixture()
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture()
async def provider_server(fake_provider: FakeProvider):
    """Run the fake provider on a local port."""
    server = TestServer(fake_provider.make_app())
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture()
def provider_url(provider_server: TestServer) -> str:
    return str(provider_server.make_url("")).rstrip("/")
