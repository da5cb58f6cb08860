"""Schemas for the Q&A, history, and store endpoints."""

from pydantic import BaseModel, Field


class QAResponse(BaseModel):
    """Response for POST /api/qa."""

    answer: str = Field(..., description="Answer generated from the retrieved context.")


class QAHistoryEntry(BaseModel):
    id: int
    question: str
    answer: str
    created_at: str


class HistoryResponse(BaseModel):
    """Response for GET /api/history (newest first)."""

    history: list[QAHistoryEntry] = Field(default_factory=list)


class StoreResult(BaseModel):
    """Result of storing a text document in the vector store."""

    document_id: str = Field(..., description="Generated id shared by every chunk of the document.")
    chunks_stored: int = Field(..., description="Number of chunks embedded and inserted.")

    model_config = {
        "json_schema_extra": {
            "examples": [{"document_id": "doc-3f2a9c1e", "chunks_stored": 2}]
        }
    }


class StoreResponse(BaseModel):
    """Response for POST /api/store."""

    data: StoreResult
