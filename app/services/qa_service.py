"""
Retrieval-augmented Q&A: retrieve matching documents, generate an answer, record history.
"""

import asyncio
import logging

from app.agent.llm import complete
from app.core import qa_history_db
from app.core.config import AGENT_TEMPERATURE, QA_MATCH_COUNT, QA_MATCH_THRESHOLD, QA_MAX_TOKENS
from app.services.retrieval_service import retrieve_documents

logger = logging.getLogger(__name__)


def build_prompt(question: str, context: list[dict]) -> str:
    joined = "\n\n".join(doc.get("content", "") for doc in context)
    return (
        "Based on the following context, please answer the question. "
        "If the context doesn't contain relevant information, say so.\n\n"
        f"Context:\n{joined}\n\n"
        f"Question: {question}\n\n"
        "Answer:"
    )


async def generate_answer(question: str, context: list[dict]) -> str:
    return await complete(
        [{"role": "user", "content": build_prompt(question, context)}],
        temperature=AGENT_TEMPERATURE,
        max_tokens=QA_MAX_TOKENS,
    )


async def answer_question(question: str) -> str:
    """
    Retrieve context (threshold QA_MATCH_THRESHOLD, QA_MATCH_COUNT matches), generate the answer,
    and store the pair in the Q&A history. A failed history write is logged, not raised.
    """
    logger.info("[qa:answer_question] IN  question=%r", question)
    context = await retrieve_documents(
        question, match_threshold=QA_MATCH_THRESHOLD, match_count=QA_MATCH_COUNT, match_min_length=0
    )
    answer = await generate_answer(question, context)
    try:
        await asyncio.to_thread(qa_history_db.add_entry, question, answer)
    except Exception as e:
        logger.error("Error storing in qa_history: %s", e)
    logger.info("[qa:answer_question] OUT context=%d answer_len=%d", len(context), len(answer))
    return answer


async def get_history() -> list[dict]:
    """Most recent Q&A entries, newest first."""
    return await asyncio.to_thread(qa_history_db.get_recent)
