"""
Application errors for clean API error handling.

Use ServiceUnavailableError when a dependency (vector store, embeddings, LLM)
is misconfigured or unreachable. Route handlers map it to 500 with the message as details.
"""


class ServiceUnavailableError(Exception):
    """Raised when a required service (e.g. vector store, OpenAI) is unavailable or misconfigured."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SearchRequestError(Exception):
    """Raised by a provider-backed search agent when the search endpoint answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)
