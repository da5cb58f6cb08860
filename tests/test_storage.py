"""
Tests for the Q&A history DB and the Milvus-backed matching. Milvus and OpenAI are faked.
"""

from unittest.mock import MagicMock, patch

import pytest

from app.core import qa_history_db
from app.core.errors import ServiceUnavailableError
from app.services.vector_store import embed_texts, match_documents, store_chunks


@pytest.fixture
def history_db(tmp_path):
    with patch("app.core.qa_history_db.QA_HISTORY_DB", str(tmp_path / "qa.db")):
        yield qa_history_db


class TestQAHistoryDB:
    def test_empty_history(self, history_db) -> None:
        assert history_db.get_recent() == []

    def test_newest_first_with_limit(self, history_db) -> None:
        for i in range(4):
            history_db.add_entry(f"q{i}", f"a{i}")
        rows = history_db.get_recent(limit=3)
        assert [r["question"] for r in rows] == ["q3", "q2", "q1"]
        assert set(rows[0]) == {"id", "question", "answer", "created_at"}

    def test_clear_all(self, history_db) -> None:
        history_db.add_entry("q", "a")
        history_db.clear_all()
        assert history_db.get_recent() == []


def _hit(id_: int, distance: float, text: str) -> dict:
    return {"id": id_, "distance": distance, "entity": {"text": text, "source": "doc-1", "chunk_id": id_}}


class TestMatchDocuments:
    def _match(self, hits, **kwargs):
        client = MagicMock()
        client.search.return_value = [hits]
        with patch("app.services.vector_store.get_milvus_client", return_value=client):
            return match_documents([0.1, 0.2], **kwargs), client

    def test_filters_by_threshold_and_min_length(self) -> None:
        hits = [
            _hit(1, 0.9, "A long enough chunk of text."),
            _hit(2, 0.8, "short"),
            _hit(3, 0.5, "Exactly at the threshold is excluded."),
            _hit(4, 0.7, "Another sufficiently long chunk."),
        ]
        matches, client = self._match(hits, match_threshold=0.5, match_count=3, match_min_length=10)
        assert [m["id"] for m in matches] == ["1", "4"]
        assert matches[0]["metadata"] == {"source": "doc-1", "chunk_id": 1}
        assert client.search.call_args.kwargs["limit"] == 12

    def test_sorted_and_truncated(self) -> None:
        hits = [_hit(i, 0.6 + i / 100, f"chunk number {i}") for i in range(6)]
        matches, _ = self._match(hits, match_threshold=0.5, match_count=2)
        assert [m["id"] for m in matches] == ["5", "4"]

    def test_no_hits(self) -> None:
        matches, _ = self._match([], match_threshold=0.5, match_count=3)
        assert matches == []


class TestEmbeddings:
    def test_missing_api_key_is_service_unavailable(self) -> None:
        with patch("app.services.vector_store.OPENAI_API_KEY", None):
            with pytest.raises(ServiceUnavailableError):
                embed_texts(["hello"])

    def test_empty_input_needs_no_client(self) -> None:
        assert embed_texts([]) == []

    def test_store_chunks_inserts_rows_with_metadata(self) -> None:
        client = MagicMock()
        chunks = [
            {"text": "first", "metadata": {"source": "doc-a", "chunk_id": 0}},
            {"text": "second", "metadata": {"source": "doc-a", "chunk_id": 1}},
        ]
        with patch("app.services.vector_store.embed_texts", return_value=[[0.1], [0.2]]), \
                patch("app.services.vector_store.get_milvus_client", return_value=client):
            assert store_chunks(chunks) == 2
        rows = client.insert.call_args.kwargs["data"]
        assert [(r["text"], r["source"], r["chunk_id"], r["vector"]) for r in rows] == [
            ("first", "doc-a", 0, [0.1]),
            ("second", "doc-a", 1, [0.2]),
        ]
        client.flush.assert_called_once()
