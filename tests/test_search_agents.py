"""
Unit tests for the search agents. HTTP is served by httpx.MockTransport; no network.
"""

import json

import httpx
import pytest

from app.agent.search_agents import DBSearchAgent, SearchAgent, WebAnswerAgent, WebSearchAgent
from app.core.errors import SearchRequestError

BASE_URL = "http://search.test"


def _agent(cls, handler):
    return cls(BASE_URL, transport=httpx.MockTransport(handler))


class TestDBSearchAgent:
    @pytest.mark.asyncio
    async def test_posts_query_and_returns_results(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"results": [
                {"id": "1", "content": "Cats sleep.", "score": 0.9, "metadata": {"source": "doc-1"}},
            ]})

        results = await _agent(DBSearchAgent, handler).search("cats")
        assert seen == {"path": "/api/search", "body": {"query": "cats"}}
        assert [r.id for r in results] == ["1"]
        assert results[0].metadata == {"source": "doc-1"}

    @pytest.mark.asyncio
    async def test_missing_results_key_returns_empty(self) -> None:
        results = await _agent(DBSearchAgent, lambda r: httpx.Response(200, json={})).search("cats")
        assert results == []

    @pytest.mark.asyncio
    async def test_error_status_raises_with_body_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"message": "Query is too vague"})

        with pytest.raises(SearchRequestError) as exc_info:
            await _agent(DBSearchAgent, handler).search("x")
        assert exc_info.value.message == "Query is too vague"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_error_status_falls_back_to_error_key(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "Error during vector search", "details": "down"})

        with pytest.raises(SearchRequestError, match="Error during vector search"):
            await _agent(DBSearchAgent, handler).search("x")

    @pytest.mark.asyncio
    async def test_error_status_without_json_uses_default_message(self) -> None:
        with pytest.raises(SearchRequestError, match="Search request failed"):
            await _agent(DBSearchAgent, lambda r: httpx.Response(502, text="bad gateway")).search("x")

    @pytest.mark.asyncio
    async def test_transport_failure_is_reraised(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(httpx.ConnectError):
            await _agent(DBSearchAgent, handler).search("x")


class TestWebAnswerAgent:
    @pytest.mark.asyncio
    async def test_maps_answer_to_single_result(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/web-search"
            return httpx.Response(200, json={"result": "Paris.", "metadata": {"source": "web-search", "model": "gpt-4o"}})

        results = await _agent(WebAnswerAgent, handler).search("capital of France")
        assert len(results) == 1
        assert results[0].content == "Paris."
        assert results[0].score == 1.0
        assert results[0].metadata["model"] == "gpt-4o"

    @pytest.mark.asyncio
    async def test_error_status_uses_web_default_message(self) -> None:
        with pytest.raises(SearchRequestError, match="Web search request failed"):
            await _agent(WebAnswerAgent, lambda r: httpx.Response(500, json={})).search("x")


class TestWebSearchAgent:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "query",
        ["anything", "", "   ", "\x00 malformed", "a" * 10_000],
        ids=["plain", "empty", "blank", "control-chars", "very-long"],
    )
    async def test_always_returns_empty(self, query: str) -> None:
        assert await WebSearchAgent().search(query) == []

    @pytest.mark.asyncio
    async def test_never_raises_even_when_logging_fails(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken(*args, **kwargs):
            raise RuntimeError("log sink unavailable")

        monkeypatch.setattr("app.agent.search_agents.logger.info", broken)
        assert await WebSearchAgent().search("x") == []


def test_all_variants_satisfy_search_agent_protocol() -> None:
    assert isinstance(DBSearchAgent(BASE_URL), SearchAgent)
    assert isinstance(WebAnswerAgent(BASE_URL), SearchAgent)
    assert isinstance(WebSearchAgent(), SearchAgent)
