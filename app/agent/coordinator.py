"""
Search coordinator: route a query to the document and web search agents via a tool-calling LLM run.

Policy: the model must try db_search first and use web_search only when the documents have nothing
relevant. The run's outcome is reduced to a single SearchResult:
  final answer → source "agent"; no answer but tool calls → last observation (source "document"/"web");
  nothing at all → direct web fallback (source "web-fallback", or "error" if that fails too).
"""

import logging
import time

from app.agent.graph import run_tool_agent
from app.agent.search_agents import SearchAgent
from app.agent.tools import Tool
from app.schemas.agent import ConversationContext, SearchResult

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a search assistant that answers from the user's uploaded documents and, when needed, the web.\n\n"
    "For every query, call the db_search tool FIRST to check the user's uploaded documents.\n\n"
    "Call web_search only when db_search returned \"No relevant documents found in the local database\" "
    "and the query needs general knowledge or current information.\n\n"
    "After each tool call, answer from what the tools returned. Never reply with an empty message.\n\n"
    "The user prefers answers from their own documents over answers from the web."
)

NO_DOCUMENTS = "No relevant documents found in the local database."
ERROR_MESSAGE = "An error occurred while processing your query. Please try again."
WEB_UNAVAILABLE = (
    "I couldn't find information in your documents, and the web search is currently unavailable. "
    "Please try again later or rephrase your query."
)


def _result_id() -> str:
    return str(int(time.time() * 1000))


class CoordinatorAgent:
    """Stateless between calls; one instance may serve concurrent requests."""

    def __init__(self, db_agent: SearchAgent, web_agent: SearchAgent) -> None:
        self.db_agent = db_agent
        self.web_agent = web_agent
        self.tools = [
            Tool(
                name="db_search",
                description="Search for relevant documents in the local database. Input should be a search query.",
                func=self._db_search,
            ),
            Tool(
                name="web_search",
                description=(
                    "Search the web for information not available in the local database. "
                    "Use this for current events or general knowledge queries."
                ),
                func=self._web_search,
            ),
        ]

    async def _db_search(self, query: str) -> str:
        try:
            results = await self.db_agent.search(query)
        except Exception as e:
            logger.error("DB search error: %s", e)
            return "Error searching the local database."
        if not results:
            return NO_DOCUMENTS
        return "\n\n".join(
            f"Result {i}: {r.content[:200]}... (Score: {r.score:.2f})"
            for i, r in enumerate(results, 1)
        )

    async def _web_search(self, query: str) -> str:
        try:
            results = await self.web_agent.search(query)
        except Exception as e:
            logger.error("Web search error: %s", e)
            return f"Error searching the web: {str(e) or 'Unknown error'}"
        body = "\n\n".join(r.content for r in results) if results else "No web results found."
        return f'Web search results for "{query}":\n\n{body}'

    async def _web_fallback(self, query: str) -> SearchResult:
        try:
            results = await self.web_agent.search(query)
        except Exception as e:
            logger.error("Fallback web search error: %s", e)
            results = []
        if not results:
            return SearchResult(id=_result_id(), content=WEB_UNAVAILABLE, score=1.0, metadata={"source": "error"})
        body = "\n\n".join(r.content for r in results)
        return SearchResult(
            id=_result_id(),
            content=f"I couldn't find information in your documents, so I searched the web.\n\n{body}",
            score=1.0,
            metadata={"source": "web-fallback"},
        )

    async def coordinate_search(self, query: str, context: ConversationContext | None = None) -> list[SearchResult]:
        """
        Run the coordinator for one query. Any failure during the run, missing OpenAI
        configuration included, becomes a single error result.
        """
        context = context or ConversationContext()
        history = [turn.model_dump() for turn in context.history]
        logger.info("[coordinator] START query=%r history_len=%d", query, len(history))
        try:
            run = await run_tool_agent(SYSTEM_PROMPT, self.tools, query, chat_history=history)
            if run["output"]:
                return [SearchResult(id=_result_id(), content=run["output"], score=1.0, metadata={"source": "agent"})]

            steps = run["intermediate_steps"]
            if steps and steps[-1].get("observation"):
                last = steps[-1]
                logger.info("[coordinator] empty output; using last observation from %s", last["tool"])
                return [
                    SearchResult(
                        id=_result_id(),
                        content=f"Here's what I found about \"{query}\":\n\n{last['observation']}",
                        score=1.0,
                        metadata={
                            "source": "document" if last["tool"] == "db_search" else "web",
                            "toolName": last["tool"],
                        },
                    )
                ]

            logger.info("[coordinator] no output and no tool steps; falling back to web search")
            return [await self._web_fallback(query)]
        except Exception as e:
            logger.exception("Error in CoordinatorAgent")
            return [SearchResult(id="error", content=ERROR_MESSAGE, score=0.0, metadata={"error": str(e)})]
