"""
Web answer: ask the chat model for general / current information about a query.
"""

import logging

from app.agent.llm import complete
from app.core.config import AGENT_TEMPERATURE, WEB_SEARCH_MODEL

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful web search assistant. Provide accurate, up-to-date information and "
    "comprehensive answers with relevant facts. Cite your sources when possible."
)


async def web_answer(query: str) -> str:
    """Return the model's answer, or "No information found." when it answered with nothing."""
    answer = await complete(
        [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": f"Please provide information about: {query}"},
        ],
        model=WEB_SEARCH_MODEL,
        temperature=AGENT_TEMPERATURE,
    )
    logger.info("[web_search:web_answer] OUT answer_len=%d", len(answer))
    return answer or "No information found."
