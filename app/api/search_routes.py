"""
Search-coordinator service routes: coordinated agent search, vector search, web answers, and file upload.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.agent.coordinator import CoordinatorAgent
from app.api.dependencies import get_coordinator
from app.api.handlers import error_response, read_json_body, reject_other_methods, require_string, server_error
from app.core.config import (
    OPENAI_API_KEY,
    SEARCH_MATCH_COUNT,
    SEARCH_MATCH_MIN_LENGTH,
    SEARCH_MATCH_THRESHOLD,
    WEB_SEARCH_MODEL,
)
from app.schemas.agent import AgentResponse, ConversationContext, ErrorResponse
from app.schemas.search import SearchResponse, WebSearchMetadata, WebSearchResponse
from app.schemas.upload import UploadResponse
from app.services.ingestion_service import FileTooLargeError, InvalidFileTypeError, store_upload
from app.services.retrieval_service import embed_query
from app.services.vector_store import match_documents
from app.services.web_search_service import web_answer

logger = logging.getLogger(__name__)
router = APIRouter()

_ERRORS = {400: {"model": ErrorResponse}, 405: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@router.get("/health", tags=["system"])
def health():
    return {"ok": True}


@router.post(
    "/api/agent",
    tags=["agent"],
    response_model=AgentResponse,
    responses=_ERRORS,
    summary="Coordinated search over documents and the web",
    description="Body {query, context?: {history: [{role, content}]}}. Returns {results: [SearchResult]}.",
)
async def post_agent(request: Request, coordinator: CoordinatorAgent = Depends(get_coordinator)):
    body = await read_json_body(request)
    query, invalid = require_string(body, "query")
    if invalid:
        return invalid
    try:
        context = ConversationContext.model_validate(body.get("context") or {"history": []})
    except ValidationError as e:
        return error_response(400, "Invalid context", details=str(e))
    logger.info("[api:post_agent] IN  query=%r history_len=%d", query, len(context.history))
    try:
        results = await coordinator.coordinate_search(query, context)
    except Exception as e:
        logger.exception("Agent API error")
        return server_error("Error processing request", e)
    logger.info("[api:post_agent] OUT results=%d", len(results))
    return AgentResponse(results=results)


@router.post(
    "/api/search",
    tags=["search"],
    response_model=SearchResponse,
    responses=_ERRORS,
    summary="Vector search over stored documents",
)
async def post_search(request: Request):
    body = await read_json_body(request)
    query, invalid = require_string(body, "query")
    if invalid:
        return invalid
    logger.info("[api:post_search] IN  query=%r", query)
    try:
        embedding = await embed_query(query)
    except Exception as e:
        logger.exception("Search API error")
        return error_response(500, str(e) or "Search failed")
    try:
        matches = await asyncio.to_thread(
            match_documents, embedding, SEARCH_MATCH_THRESHOLD, SEARCH_MATCH_COUNT, SEARCH_MATCH_MIN_LENGTH
        )
    except Exception as e:
        logger.exception("Error during vector search")
        return server_error("Error during vector search", e)
    return {"results": matches}


@router.post(
    "/api/web-search",
    tags=["search"],
    response_model=WebSearchResponse,
    responses=_ERRORS,
    summary="Answer a query with the web-search assistant model",
)
async def post_web_search(request: Request):
    body = await read_json_body(request)
    query, invalid = require_string(body, "query")
    if invalid:
        return invalid
    if not OPENAI_API_KEY:
        logger.error("OpenAI API key not configured")
        return error_response(500, "OpenAI API key not configured")
    logger.info("[api:post_web_search] IN  query=%r", query)
    try:
        answer = await web_answer(query)
    except Exception as e:
        logger.exception("Web Search API error")
        return error_response(500, str(e) or "Web search failed")
    return WebSearchResponse(result=answer, metadata=WebSearchMetadata(model=WEB_SEARCH_MODEL))


@router.post(
    "/api/upload",
    tags=["storage"],
    response_model=UploadResponse,
    responses={**_ERRORS, 413: {"model": ErrorResponse}},
    summary="Upload a .txt, .md or .pdf file and store it as a searchable document",
    description="Multipart form with a `file` field. The text is extracted, chunked, embedded and stored.",
)
async def post_upload(
    request: Request,
    file: UploadFile | None = File(None, description="One .txt, .md or .pdf file."),
):
    if "multipart/form-data" not in request.headers.get("content-type", ""):
        return error_response(400, "Expected multipart/form-data request")
    if file is None:
        return error_response(400, "No file provided")
    filename = file.filename or ""
    raw = await file.read()
    logger.info("[api:post_upload] IN  file=%r bytes=%d", filename, len(raw))
    try:
        result = await store_upload(filename, raw)
    except FileTooLargeError as e:
        return error_response(413, str(e))
    except (InvalidFileTypeError, ValueError) as e:
        return error_response(400, str(e))
    except Exception as e:
        logger.exception("Upload API error")
        return error_response(500, str(e) or "Failed to upload file")
    return UploadResponse(file_name=filename or "unnamed", data=result)


for _path in ("/api/agent", "/api/search", "/api/web-search", "/api/upload"):
    reject_other_methods(router, _path, "POST")
