"""
Agent LLM: OpenAI chat completions (plain and tool-calling).

Both calls require OPENAI_API_KEY and raise ServiceUnavailableError without it.
"""

import json
import logging
from typing import Any

from openai import AsyncOpenAI

from app.core.config import LLM_API_TIMEOUT, OPENAI_API_KEY, OPENAI_MODEL_NAME
from app.core.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)


def get_client() -> AsyncOpenAI:
    """Build an AsyncOpenAI client from config."""
    if not OPENAI_API_KEY:
        logger.error("[llm] Missing OPENAI_API_KEY environment variable")
        raise ServiceUnavailableError("OPENAI_API_KEY is not set in environment variables")
    return AsyncOpenAI(api_key=OPENAI_API_KEY, timeout=LLM_API_TIMEOUT)


async def complete(
    messages: list[dict[str, Any]],
    model: str | None = None,
    temperature: float = 0.7,
    max_tokens: int | None = None,
) -> str:
    """Call chat completions and return the stripped message content ("" when none)."""
    model = model or OPENAI_MODEL_NAME
    logger.info("[llm:complete] IN  model=%s messages=%d max_tokens=%s", model, len(messages), max_tokens)
    client = get_client()
    kwargs: dict[str, Any] = {"model": model, "messages": messages, "temperature": temperature}
    if max_tokens is not None:
        kwargs["max_tokens"] = max_tokens
    response = await client.chat.completions.create(**kwargs)
    msg = response.choices[0].message if response.choices else None
    out = ((msg.content if msg else None) or "").strip()
    logger.info("[llm:complete] OUT response_len=%d", len(out))
    return out


async def chat_with_tools(
    messages: list[dict[str, Any]],
    tools: list[dict[str, Any]],
    model: str | None = None,
    temperature: float = 0.7,
) -> tuple[str | None, list[dict[str, Any]] | None]:
    """
    Call OpenAI chat with tools. Used by the tool-calling agent graph.
    Returns (content, tool_calls). If tool_calls is non-empty, caller should execute
    them and call again with tool results; if content is set and no tool_calls, that's the final answer.
    Each tool call is {"id", "name", "arguments": dict}.
    """
    client = get_client()
    response = await client.chat.completions.create(
        model=model or OPENAI_MODEL_NAME,
        messages=messages,
        tools=tools,
        temperature=temperature,
    )
    msg = response.choices[0].message if response.choices else None
    if not msg:
        return None, None
    content = (getattr(msg, "content", None) or "").strip() or None
    raw_tool_calls = getattr(msg, "tool_calls", None) or []
    tool_calls = []
    for tc in raw_tool_calls:
        fn = getattr(tc, "function", None)
        if not fn:
            continue
        fargs = getattr(fn, "arguments", None) or "{}"
        try:
            args = json.loads(fargs) if isinstance(fargs, str) else fargs
        except json.JSONDecodeError:
            args = {}
        tool_calls.append({"id": getattr(tc, "id", None) or "", "name": getattr(fn, "name", None) or "", "arguments": args})
    if tool_calls:
        logger.info("[llm:chat_with_tools] OUT tool_calls=%s", [t["name"] for t in tool_calls])
    if content:
        logger.info("[llm:chat_with_tools] OUT content_len=%d", len(content))
    return content, tool_calls or None
