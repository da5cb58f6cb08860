"""
Q&A agent: answer free-form input with document search, date/time, and a calculator.

Responsibility: Run the tool-calling agent for the Q&A service's /api/agent. Called by the API; no HTTP here.
"""

import logging

from app.agent.graph import run_tool_agent
from app.agent.tools import QNA_TOOLS

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful AI assistant that can search documents, perform calculations, "
    "and provide current time information."
)


async def use_agent(user_input: str) -> dict:
    """Run the Q&A agent. Returns {"input", "output"}; errors are logged and re-raised."""
    try:
        result = await run_tool_agent(SYSTEM_PROMPT, QNA_TOOLS, user_input)
    except Exception:
        logger.exception("Error using agent")
        raise
    return {"input": result["input"], "output": result["output"]}
