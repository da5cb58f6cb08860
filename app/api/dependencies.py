"""
FastAPI dependencies for the search service.

The coordinator is built once per app (create_search_app) and stored on app.state;
routes receive it through Depends(get_coordinator), so tests can override it.
"""

import logging

from fastapi import Request

from app.agent.coordinator import CoordinatorAgent
from app.agent.search_agents import DBSearchAgent, SearchAgent, WebAnswerAgent, WebSearchAgent
from app.core.config import API_BASE_URL, WEB_SEARCH_PROVIDER

logger = logging.getLogger(__name__)


def build_coordinator(base_url: str = API_BASE_URL, web_provider: str = WEB_SEARCH_PROVIDER) -> CoordinatorAgent:
    """Wire the coordinator to its search agents."""
    web_agent: SearchAgent
    if web_provider == "none":
        web_agent = WebSearchAgent()
    else:
        web_agent = WebAnswerAgent(base_url)
    logger.info("Coordinator created base_url=%s web_agent=%s", base_url, type(web_agent).__name__)
    return CoordinatorAgent(DBSearchAgent(base_url), web_agent)


def get_coordinator(request: Request) -> CoordinatorAgent:
    return request.app.state.coordinator
