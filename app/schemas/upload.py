"""Schemas for the upload endpoint."""

from pydantic import BaseModel, Field

from app.schemas.qa import StoreResult


class UploadResponse(BaseModel):
    """Response after an uploaded file was extracted, chunked and stored."""

    success: bool = True
    message: str = "File uploaded and processed successfully"
    file_name: str = Field(..., description="Name of the uploaded file.")
    data: StoreResult

    model_config = {
        "json_schema_extra": {
            "examples": [{
                "success": True,
                "message": "File uploaded and processed successfully",
                "file_name": "leave_policy.pdf",
                "data": {"document_id": "doc-3f2a9c1e", "chunks_stored": 12},
            }]
        }
    }
