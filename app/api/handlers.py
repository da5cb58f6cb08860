"""
API handlers: read request data, validate required fields, map results/errors to HTTP.

Responsibility: Bridge HTTP types and services. Every error body is {"error": ..., "details"?: ...}.
Lives in the API layer so services stay free of FastAPI/HTTP types.
"""

import json
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")


def error_response(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    content: dict[str, Any] = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def server_error(error: str, exc: BaseException) -> JSONResponse:
    """500 with the exception message as details."""
    return error_response(500, error, details=str(exc) or "Unknown error occurred")


def method_not_allowed() -> JSONResponse:
    return error_response(405, "Method not allowed")


def reject_other_methods(router: APIRouter, path: str, allowed: str) -> None:
    """Answer every method except `allowed` on `path` with 405, without reading the body."""

    async def _method_not_allowed() -> JSONResponse:
        return method_not_allowed()

    router.add_api_route(
        path,
        _method_not_allowed,
        methods=[m for m in _METHODS if m != allowed],
        include_in_schema=False,
    )


async def read_json_body(request: Request) -> dict[str, Any]:
    """Parsed JSON object body; an empty, malformed, or non-object body reads as {}."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return body if isinstance(body, dict) else {}


def require_string(body: dict[str, Any], field: str) -> tuple[str, JSONResponse | None]:
    """
    Return (value, None) when body[field] is a non-empty string, else ("", 400 response).
    Messages: "<Field> is required" / "<Field> must be a string".
    """
    value = body.get(field)
    label = field.capitalize()
    if not value:
        return "", error_response(400, f"{label} is required")
    if not isinstance(value, str):
        return "", error_response(400, f"{label} must be a string")
    return value, None
