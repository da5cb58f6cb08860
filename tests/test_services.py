"""
Service-layer tests: Q&A pipeline, text storage, retrieval and the web answer service.
"""

from unittest.mock import AsyncMock, patch

import pytest

from app.services.document_service import store_text
from app.services.qa_service import answer_question, build_prompt
from app.services.retrieval_service import retrieve_documents
from app.services.web_search_service import web_answer


class TestAnswerQuestion:
    @pytest.mark.asyncio
    async def test_uses_qa_match_settings(self) -> None:
        docs = [{"content": "Leave is 20 days."}]
        with patch("app.services.qa_service.retrieve_documents", new=AsyncMock(return_value=docs)) as mock_retrieve, \
                patch("app.services.qa_service.complete", new=AsyncMock(return_value="20 days.")) as mock_complete, \
                patch("app.services.qa_service.qa_history_db.add_entry") as mock_add:
            assert await answer_question("How much leave?") == "20 days."
        mock_retrieve.assert_awaited_once_with(
            "How much leave?", match_threshold=0.7, match_count=5, match_min_length=0
        )
        prompt = mock_complete.await_args.args[0][0]["content"]
        assert "Leave is 20 days." in prompt
        mock_add.assert_called_once_with("How much leave?", "20 days.")

    @pytest.mark.asyncio
    async def test_history_failure_still_returns_answer(self) -> None:
        with patch("app.services.qa_service.retrieve_documents", new=AsyncMock(return_value=[])), \
                patch("app.services.qa_service.complete", new=AsyncMock(return_value="No idea.")), \
                patch("app.services.qa_service.qa_history_db.add_entry", side_effect=RuntimeError("disk full")):
            assert await answer_question("q") == "No idea."

    def test_prompt_layout(self) -> None:
        prompt = build_prompt("Why?", [{"content": "one"}, {"content": "two"}])
        assert "Context:\none\n\ntwo\n\n" in prompt
        assert prompt.endswith("Question: Why?\n\nAnswer:")


class TestStoreText:
    @pytest.mark.asyncio
    async def test_chunks_carry_document_metadata(self) -> None:
        with patch("app.services.document_service.store_chunks", return_value=1) as mock_store:
            result = await store_text("  Hello world.  ")
        assert result.document_id.startswith("doc-")
        assert result.chunks_stored == 1
        (items,) = mock_store.call_args.args
        assert items == [{"text": "Hello world.", "metadata": {"source": result.document_id, "chunk_id": 0}}]

    @pytest.mark.asyncio
    async def test_blank_text_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="empty after cleaning"):
            await store_text(" \n\n ")


class TestRetrieveDocuments:
    @pytest.mark.asyncio
    async def test_blank_query_skips_providers(self) -> None:
        with patch("app.services.retrieval_service.embed_texts") as mock_embed:
            assert await retrieve_documents("   ") == []
        mock_embed.assert_not_called()

    @pytest.mark.asyncio
    async def test_embeds_then_matches(self) -> None:
        with patch("app.services.retrieval_service.embed_texts", return_value=[[0.3, 0.4]]), \
                patch("app.services.retrieval_service.match_documents", return_value=[{"id": "1"}]) as mock_match:
            assert await retrieve_documents(" cats ", match_threshold=0.6, match_count=2) == [{"id": "1"}]
        mock_match.assert_called_once_with([0.3, 0.4], 0.6, 2, 10)


class TestWebAnswer:
    @pytest.mark.asyncio
    async def test_returns_model_answer(self) -> None:
        with patch("app.services.web_search_service.complete", new=AsyncMock(return_value="Paris.")):
            assert await web_answer("capital of France") == "Paris."

    @pytest.mark.asyncio
    async def test_empty_answer_becomes_placeholder(self) -> None:
        with patch("app.services.web_search_service.complete", new=AsyncMock(return_value="")):
            assert await web_answer("?") == "No information found."
