"""
Tests for scripts/store_documents.py. store_text and the history DB are mocked.
"""

import importlib.util
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from app.schemas.qa import StoreResult

_SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "store_documents.py"


@pytest.fixture
def script():
    spec = importlib.util.spec_from_file_location("store_documents", _SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _run(script, monkeypatch: pytest.MonkeyPatch, *args: str) -> None:
    monkeypatch.setattr("sys.argv", ["store_documents.py", *args])
    script.main()


def test_stores_every_file(script, monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    doc = tmp_path / "notes.txt"
    doc.write_text("Cats sleep a lot.", encoding="utf-8")
    result = StoreResult(document_id="doc-abc", chunks_stored=1)
    with patch.object(script, "store_text", new=AsyncMock(return_value=result)) as mock_store:
        _run(script, monkeypatch, str(doc))
    mock_store.assert_awaited_once_with("Cats sleep a lot.")
    out = capsys.readouterr().out
    assert "doc-abc (1 chunks)" in out
    assert "Stored 1 of 1 files." in out


def test_skipped_files_exit_with_status_1(script, monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    blank = tmp_path / "blank.txt"
    blank.write_text("   ", encoding="utf-8")
    missing = tmp_path / "missing.txt"
    with patch.object(script, "store_text", new=AsyncMock(side_effect=ValueError("Text is empty after cleaning"))):
        with pytest.raises(SystemExit) as exc_info:
            _run(script, monkeypatch, str(blank), str(missing))
    assert exc_info.value.code == 1
    out = capsys.readouterr().out
    assert "skipped: " + str(blank) + " (Text is empty after cleaning)" in out
    assert "skipped: " + str(missing) in out
    assert "Stored 0 of 2 files." in out


def test_reset_history_clears_first(script, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    doc = tmp_path / "a.txt"
    doc.write_text("Some text.", encoding="utf-8")
    result = StoreResult(document_id="doc-1", chunks_stored=1)
    with patch.object(script, "clear_all") as mock_clear, \
            patch.object(script, "store_text", new=AsyncMock(return_value=result)):
        _run(script, monkeypatch, "--reset-history", str(doc))
    mock_clear.assert_called_once_with()
