# Run from project root:
#   uvicorn app.main:qna_app --reload               (document Q&A service)
#   uvicorn app.main:search_app --reload --port 8000 (search-coordinator service; API_BASE_URL points here)

import logging

from fastapi import FastAPI

from app.agent.coordinator import CoordinatorAgent
from app.api.dependencies import build_coordinator
from app.api.qna_routes import router as qna_router
from app.api.search_routes import router as search_router

logging.basicConfig(level=logging.INFO)


def create_qna_app() -> FastAPI:
    app = FastAPI(title="LangChain Document Q&A")
    app.include_router(qna_router)
    return app


def create_search_app(coordinator: CoordinatorAgent | None = None) -> FastAPI:
    app = FastAPI(title="LangChain Search System")
    app.state.coordinator = coordinator or build_coordinator()
    app.include_router(search_router)
    return app


qna_app = create_qna_app()
search_app = create_search_app()
