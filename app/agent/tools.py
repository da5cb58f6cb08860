"""
Agent tools: definitions and execution for tool-calling mode.

Every tool takes a single string `input` and returns a string observation for the LLM.
Tools report their own failures as observation text; they do not raise.
Q&A agent tools: document_search, get_datetime, calculator.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable

from app.core.config import SEARCH_MATCH_COUNT, SEARCH_MATCH_MIN_LENGTH, SEARCH_MATCH_THRESHOLD
from app.services.retrieval_service import retrieve_documents

logger = logging.getLogger(__name__)

_CALC_PATTERN = re.compile(r"^[0-9+\-*/(). ]+$")


@dataclass(frozen=True)
class Tool:
    """A named async function the LLM may call with one string argument."""

    name: str
    description: str
    func: Callable[[str], Awaitable[str]]

    def schema(self) -> dict[str, Any]:
        """OpenAI function-calling definition."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": {"input": {"type": "string", "description": "Tool input"}},
                    "required": ["input"],
                },
            },
        }


async def _document_search(query: str) -> str:
    try:
        docs = await retrieve_documents(
            query,
            match_threshold=SEARCH_MATCH_THRESHOLD,
            match_count=SEARCH_MATCH_COUNT,
            match_min_length=SEARCH_MATCH_MIN_LENGTH,
        )
    except Exception:
        logger.exception("[tools] document_search failed")
        return "Error searching documents."
    if not docs:
        return "No relevant documents found."
    return "\n\n".join(
        f"Document: {d.get('content', '')[:200]}... (Similarity: {d.get('score', 0.0) * 100:.1f}%)"
        for d in docs
    )


async def _get_datetime(_: str = "") -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def _safe_calculator(expression: str) -> str:
    """Evaluate a safe math expression (digits, spaces and + - * / ( ) . only)."""
    expr = (expression or "").strip()
    if not expr or not _CALC_PATTERN.match(expr):
        return "Invalid calculation expression."
    try:
        return str(eval(expr, {"__builtins__": {}}, {}))
    except Exception:
        return "Error performing calculation."


async def _calculator(expression: str) -> str:
    return _safe_calculator(expression)


QNA_TOOLS: list[Tool] = [
    Tool(
        name="document_search",
        description="Search for relevant documents in the database. Input should be a search query.",
        func=_document_search,
    ),
    Tool(
        name="get_datetime",
        description="Get the current date and time. No input needed.",
        func=_get_datetime,
    ),
    Tool(
        name="calculator",
        description="Perform basic arithmetic calculations. Input should be a mathematical expression.",
        func=_calculator,
    ),
]


async def execute_tool(tools: list[Tool], name: str, arguments: dict[str, Any]) -> str:
    """
    Execute a tool by name with the given arguments. Returns a string result for the LLM.
    """
    args = arguments or {}
    logger.info("[tools] execute_tool name=%r arguments=%r", name, args)
    for tool in tools:
        if tool.name == name:
            value = args.get("input", "")
            return await tool.func(value if isinstance(value, str) else str(value))
    return f"Unknown tool: {name}"
