"""
Search agents: one capability, `async search(query) -> list[SearchResult]`, over one backing source each.

DBSearchAgent and WebAnswerAgent call this deployment's /api/search and /api/web-search over HTTP;
failures are logged and propagated. WebSearchAgent is a placeholder that always returns [].
"""

import logging
import time
from typing import Any, Protocol, runtime_checkable

import httpx

from app.core.config import API_BASE_URL, SEARCH_HTTP_TIMEOUT
from app.core.errors import SearchRequestError
from app.schemas.agent import SearchResult

logger = logging.getLogger(__name__)


@runtime_checkable
class SearchAgent(Protocol):
    async def search(self, query: str) -> list[SearchResult]: ...


def _error_message(response: httpx.Response, default: str) -> str:
    """Pull `message` (or `error`) out of a JSON error body."""
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or default
    return default


class _EndpointAgent:
    """POSTs {"query": ...} to one endpoint of the search service."""

    path = ""
    default_error = "Search request failed"

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = SEARCH_HTTP_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _post(self, query: str) -> Any:
        url = f"{self.base_url}{self.path}"
        logger.info("[%s] POST %s query=%r", type(self).__name__, url, query)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, json={"query": query})
        except httpx.HTTPError as e:
            logger.error("[%s] request failed: %s", type(self).__name__, e)
            raise
        logger.info("[%s] response status=%d", type(self).__name__, response.status_code)
        if not response.is_success:
            message = _error_message(response, self.default_error)
            logger.error("[%s] error response status=%d message=%r", type(self).__name__, response.status_code, message)
            raise SearchRequestError(message, status_code=response.status_code)
        return response.json()


class DBSearchAgent(_EndpointAgent):
    """Vector search over stored documents via /api/search."""

    path = "/api/search"
    default_error = "Search request failed"

    async def search(self, query: str) -> list[SearchResult]:
        data = await self._post(query)
        results = [SearchResult.model_validate(r) for r in (data.get("results") or [])]
        logger.info("[DBSearchAgent] OUT results=%d", len(results))
        return results


class WebAnswerAgent(_EndpointAgent):
    """LLM-backed web answer via /api/web-search, returned as a single result."""

    path = "/api/web-search"
    default_error = "Web search request failed"

    async def search(self, query: str) -> list[SearchResult]:
        data = await self._post(query)
        answer = data.get("result") or ""
        if not answer:
            return []
        return [
            SearchResult(
                id=str(int(time.time() * 1000)),
                content=answer,
                score=1.0,
                metadata=dict(data.get("metadata") or {"source": "web-search"}),
            )
        ]


class WebSearchAgent:
    """
    Placeholder web search: logs the query and returns no results.
    Never raises; an internal failure is logged and reported as [].
    """

    async def search(self, query: str) -> list[SearchResult]:
        try:
            logger.info("[WebSearchAgent] web search for: %r", query)
            return []
        except Exception:
            logger.exception("Error in WebSearchAgent")
            return []
