"""Schemas shared by the agent endpoints and the search agents."""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class SearchResult(BaseModel):
    """One retrieved item. Metadata keys depend on the producer (source, toolName, chunk_id, error, ...)."""

    id: str = Field(..., description="Result id (document chunk id, timestamp, or 'error').")
    content: str = Field("", description="Result text.")
    score: float = Field(0.0, description="Similarity or confidence score.")
    metadata: dict[str, Any] = Field(default_factory=dict)


class ConversationTurn(BaseModel):
    """One history turn. Any role other than "user" is treated as an assistant turn."""

    role: Literal["user", "assistant"] = "assistant"
    content: str = ""

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, value: Any) -> str:
        return "user" if value == "user" else "assistant"

    @field_validator("content", mode="before")
    @classmethod
    def _none_content(cls, value: Any) -> Any:
        return "" if value is None else value


class ConversationContext(BaseModel):
    """Caller-supplied conversation history sent alongside a query."""

    history: list[ConversationTurn] = Field(default_factory=list)
    preferences: dict[str, Any] = Field(default_factory=dict)

    @field_validator("history", mode="before")
    @classmethod
    def _none_history(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("preferences", mode="before")
    @classmethod
    def _none_preferences(cls, value: Any) -> Any:
        return {} if value is None else value


class AgentResponse(BaseModel):
    """Response for the search service's POST /api/agent."""

    results: list[SearchResult] = Field(default_factory=list)


class AgentRunResponse(BaseModel):
    """Response for the Q&A service's POST /api/agent."""

    input: str
    output: str = ""


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
