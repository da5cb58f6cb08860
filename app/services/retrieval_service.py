"""
Retrieval: embed a query and match it against the document store.

Responsibility: Async entry points over the blocking vector store, used by the search endpoint,
the Q&A pipeline, and the Q&A agent's document_search tool.
"""

import asyncio
import logging

from app.core.config import SEARCH_MATCH_COUNT, SEARCH_MATCH_MIN_LENGTH, SEARCH_MATCH_THRESHOLD
from app.services.vector_store import embed_texts, match_documents

logger = logging.getLogger(__name__)


async def embed_query(text: str) -> list[float]:
    """Embed a single query string."""
    vectors = await asyncio.to_thread(embed_texts, [text])
    return vectors[0]


async def retrieve_documents(
    query: str,
    match_threshold: float = SEARCH_MATCH_THRESHOLD,
    match_count: int = SEARCH_MATCH_COUNT,
    match_min_length: int = SEARCH_MATCH_MIN_LENGTH,
) -> list[dict]:
    """
    Pipeline: embed query → similarity match in Milvus → top chunks.
    Returns [] for an empty query without calling the providers.
    """
    logger.info("[retrieval:retrieve_documents] IN  query=%r threshold=%.2f count=%d", query, match_threshold, match_count)
    if not query or not query.strip():
        return []
    embedding = await embed_query(query.strip())
    matches = await asyncio.to_thread(
        match_documents, embedding, match_threshold, match_count, match_min_length
    )
    logger.info("[retrieval:retrieve_documents] OUT matches=%d", len(matches))
    return matches
