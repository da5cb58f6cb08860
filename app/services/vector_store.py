"""
Vector store client: Milvus connection, OpenAI embeddings, chunk storage and similarity matching.

Responsibility: Connect to Milvus, embed texts with the configured OpenAI embedding model,
store chunks with metadata, and match a query embedding against stored chunks.
All functions are blocking; async callers go through app.services.retrieval_service.
"""

import logging
from typing import Any

from app.core.config import (
    COLLECTION_NAME,
    EMBEDDING_DIMENSIONS,
    LLM_API_TIMEOUT,
    MILVUS_TOKEN,
    MILVUS_URI,
    OPENAI_API_KEY,
    OPENAI_EMBEDDING_MODEL,
)
from app.core.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)

# Over-fetch so the min-length filter can still fill match_count
_OVERSAMPLE = 4


def embed_texts(texts: list[str]) -> list[list[float]]:
    """
    Embed texts with OpenAI (OPENAI_EMBEDDING_MODEL). Returns one vector per input, in order.

    OpenAI embeddings are unit length, so they can be compared with Milvus COSINE directly.
    """
    if not texts:
        return []
    if not OPENAI_API_KEY:
        raise ServiceUnavailableError("OPENAI_API_KEY is not set in environment variables")

    from openai import OpenAI

    client = OpenAI(api_key=OPENAI_API_KEY, timeout=LLM_API_TIMEOUT)
    response = client.embeddings.create(model=OPENAI_EMBEDDING_MODEL, input=texts)
    vectors = [item.embedding for item in sorted(response.data, key=lambda d: d.index)]
    if len(vectors) != len(texts) or any(not v for v in vectors):
        raise RuntimeError("Failed to generate embedding")
    logger.info("[vector_store:embed_texts] OUT vectors=%d dim=%d", len(vectors), len(vectors[0]))
    return vectors


def get_milvus_client() -> Any:
    """
    Connect to Milvus and return a client. Creates the collection if it does not exist
    (dim EMBEDDING_DIMENSIONS, COSINE metric).
    """
    if not MILVUS_URI:
        raise ServiceUnavailableError("MILVUS_URI must be set in .env")

    from pymilvus import MilvusClient

    if MILVUS_TOKEN:
        client = MilvusClient(uri=MILVUS_URI, token=MILVUS_TOKEN)
    else:
        client = MilvusClient(uri=MILVUS_URI)
    logger.info("Milvus connection established")

    if not client.has_collection(COLLECTION_NAME):
        client.create_collection(
            collection_name=COLLECTION_NAME,
            dimension=EMBEDDING_DIMENSIONS,
            primary_field_name="id",
            vector_field_name="vector",
            metric_type="COSINE",
            auto_id=True,
        )
        logger.info("Collection %s created (dim=%s)", COLLECTION_NAME, EMBEDDING_DIMENSIONS)
    return client


def store_chunks(chunks: list[dict]) -> int:
    """
    Embed each chunk, insert into Milvus with metadata (text, source, chunk_id),
    then flush the collection. Returns the number of chunks stored.
    """
    if not chunks:
        return 0

    texts = [c["text"] for c in chunks]
    embeddings = embed_texts(texts)

    client = get_milvus_client()
    rows = []
    for c, emb in zip(chunks, embeddings):
        meta = c.get("metadata", {})
        rows.append({
            "vector": emb,
            "text": c["text"],
            "source": meta.get("source", ""),
            "chunk_id": meta.get("chunk_id", 0),
        })

    client.insert(collection_name=COLLECTION_NAME, data=rows)
    client.flush(collection_name=COLLECTION_NAME)
    logger.info("Embedded and stored %d chunks", len(rows))
    return len(rows)


def _hit_to_result(hit: dict) -> dict:
    # Milvus returns dict with "distance", "id", and optionally "entity" (output_fields)
    entity = hit.get("entity") or hit
    return {
        "id": str(hit.get("id", entity.get("id", ""))),
        "content": entity.get("text", "") or "",
        "score": float(hit.get("distance", hit.get("score", 0.0))),
        "metadata": {
            "source": entity.get("source", ""),
            "chunk_id": entity.get("chunk_id", 0),
        },
    }


def match_documents(
    query_embedding: list[float],
    match_threshold: float,
    match_count: int,
    match_min_length: int = 0,
) -> list[dict]:
    """
    Return up to match_count chunks whose cosine similarity is above match_threshold and whose
    text is at least match_min_length characters, best match first.
    Each item: {id, content, score, metadata: {source, chunk_id}}.
    """
    client = get_milvus_client()
    results = client.search(
        collection_name=COLLECTION_NAME,
        data=[query_embedding],
        limit=max(match_count, 1) * _OVERSAMPLE,
        output_fields=["text", "source", "chunk_id"],
        search_params={"metric_type": "COSINE"},
    )

    hits = results[0] if results else []
    matches = []
    for h in hits:
        item = _hit_to_result(h)
        if item["score"] <= match_threshold:
            continue
        if len(item["content"]) < match_min_length:
            continue
        matches.append(item)
    matches.sort(key=lambda m: -m["score"])
    matches = matches[:match_count]
    logger.info(
        "[vector_store:match_documents] OUT hits=%d matches=%d threshold=%.2f first_scores=%s",
        len(hits), len(matches), match_threshold, [round(m["score"], 4) for m in matches[:3]],
    )
    return matches

