"""Schemas for the search service's internal endpoints."""

from pydantic import BaseModel, Field

from app.schemas.agent import SearchResult


class SearchResponse(BaseModel):
    """Response for POST /api/search."""

    results: list[SearchResult] = Field(default_factory=list)


class WebSearchMetadata(BaseModel):
    source: str = "web-search"
    model: str


class WebSearchResponse(BaseModel):
    """Response for POST /api/web-search."""

    result: str = Field(..., description="Answer text from the web-search assistant.")
    metadata: WebSearchMetadata
