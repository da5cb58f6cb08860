"""
Document Q&A service routes: agent, retrieval-augmented Q&A, history, and text storage.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.api.handlers import read_json_body, reject_other_methods, require_string, server_error
from app.schemas.agent import AgentRunResponse, ErrorResponse
from app.schemas.qa import HistoryResponse, QAResponse, StoreResponse, StoreResult
from app.services.agent_service import use_agent
from app.services.document_service import store_text
from app.services.qa_service import answer_question, get_history

logger = logging.getLogger(__name__)
router = APIRouter()

_ERRORS = {400: {"model": ErrorResponse}, 405: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@router.get("/health", tags=["system"])
def health():
    return {"ok": True}


# --- Agent ---

@router.post(
    "/api/agent",
    tags=["agent"],
    response_model=AgentRunResponse,
    responses=_ERRORS,
    summary="Run the document Q&A agent",
    description="Body {input}. Runs a tool-calling agent (document_search, get_datetime, calculator).",
)
async def post_agent(request: Request):
    body = await read_json_body(request)
    user_input, invalid = require_string(body, "input")
    if invalid:
        return invalid
    logger.info("[api:post_agent] IN  input=%r", user_input)
    try:
        result = await use_agent(user_input)
    except Exception as e:
        logger.exception("Agent API error")
        return server_error("Error processing request", e)
    return JSONResponse(content=result)


# --- Q&A ---

@router.post(
    "/api/qa",
    tags=["qa"],
    response_model=QAResponse,
    responses=_ERRORS,
    summary="Answer a question from stored documents",
)
async def post_qa(request: Request):
    body = await read_json_body(request)
    question, invalid = require_string(body, "question")
    if invalid:
        return invalid
    try:
        answer = await answer_question(question)
    except Exception as e:
        logger.exception("Error in Q&A API")
        return server_error("Failed to process question", e)
    return QAResponse(answer=answer)


@router.get(
    "/api/history",
    tags=["qa"],
    response_model=HistoryResponse,
    responses={405: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Most recent questions and answers",
)
async def get_qa_history():
    try:
        history = await get_history()
    except Exception as e:
        logger.exception("Error in history API")
        return server_error("Failed to fetch history", e)
    return {"history": history}


# --- Storage ---

async def _store(request: Request, failure: str) -> StoreResult | JSONResponse:
    body = await read_json_body(request)
    text, invalid = require_string(body, "text")
    if invalid:
        return invalid
    try:
        return await store_text(text)
    except Exception as e:
        logger.exception("Error in store API")
        return server_error(failure, e)


@router.post(
    "/api/store",
    tags=["storage"],
    response_model=StoreResponse,
    responses=_ERRORS,
    summary="Store a text document (chunked and embedded)",
)
async def post_store(request: Request):
    result = await _store(request, "Failed to store text")
    if isinstance(result, JSONResponse):
        return result
    return StoreResponse(data=result)


@router.post(
    "/api/store-embedding",
    tags=["storage"],
    response_model=StoreResult,
    responses=_ERRORS,
    summary="Store a text document and return the stored-document summary",
)
async def post_store_embedding(request: Request):
    return await _store(request, "Failed to store embedding")


for _path, _method in (
    ("/api/agent", "POST"),
    ("/api/qa", "POST"),
    ("/api/history", "GET"),
    ("/api/store", "POST"),
    ("/api/store-embedding", "POST"),
):
    reject_other_methods(router, _path, _method)
