"""
Application configuration (env, settings, constants).

Responsibility: Centralize config loading, environment variables, and app-wide
constants. Keys and model names are passed through to the providers unmodified.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# OpenAI (agents, Q&A answers, web answers, embeddings)
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "").strip()
OPENAI_MODEL_NAME: str = (
    os.getenv("OPENAI_MODEL_NAME", "gpt-4o").strip() or "gpt-4o"
)
OPENAI_EMBEDDING_MODEL: str = (
    os.getenv("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small").strip()
    or "text-embedding-3-small"
)
WEB_SEARCH_MODEL: str = os.getenv("WEB_SEARCH_MODEL", "gpt-4o").strip() or "gpt-4o"

# text-embedding-3-small = 1536
EMBEDDING_DIMENSIONS: int = int(os.getenv("EMBEDDING_DIMENSIONS", "1536"))

# Milvus (document store). MILVUS_URI may also be a local Milvus Lite file path.
MILVUS_URI: str = os.getenv("MILVUS_URI", "").strip()
MILVUS_TOKEN: str = os.getenv("MILVUS_TOKEN", "").strip()
COLLECTION_NAME: str = os.getenv("COLLECTION_NAME", "documents").strip() or "documents"

# Base URL the search agents use to reach /api/search and /api/web-search
API_BASE_URL: str = (
    os.getenv("API_BASE_URL", "http://localhost:8000").strip().rstrip("/")
    or "http://localhost:8000"
)

# "openai" -> WebAnswerAgent (/api/web-search); "none" -> WebSearchAgent placeholder
WEB_SEARCH_PROVIDER: str = os.getenv("WEB_SEARCH_PROVIDER", "openai").strip().lower() or "openai"

# Q&A history (SQLite, relative to project root)
QA_HISTORY_DB: str = os.getenv("QA_HISTORY_DB", "data/qa_history.db").strip() or "data/qa_history.db"
QA_HISTORY_LIMIT: int = 50

# Document matching: search endpoint and the Q&A agent's document_search tool
SEARCH_MATCH_THRESHOLD: float = 0.5
SEARCH_MATCH_COUNT: int = 3
SEARCH_MATCH_MIN_LENGTH: int = 10

# Document matching: /api/qa context retrieval
QA_MATCH_THRESHOLD: float = 0.7
QA_MATCH_COUNT: int = 5

# Chunking defaults for /api/store
CHUNK_SIZE: int = 500
CHUNK_OVERLAP: int = 50

# Agent runs
AGENT_TEMPERATURE: float = 0.7
MAX_AGENT_ROUNDS: int = 6
QA_MAX_TOKENS: int = 500

# API timeouts (seconds)
LLM_API_TIMEOUT: float = 60.0
SEARCH_HTTP_TIMEOUT: float = 30.0

# File uploads (search service POST /api/upload)
ALLOWED_EXTENSIONS: frozenset[str] = frozenset({".txt", ".md", ".pdf"})
MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
