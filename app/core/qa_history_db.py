"""
Lightweight SQLite DB for the Q&A history.

Creates data/qa_history.db (relative to project root, or QA_HISTORY_DB).
Table: qa_history (id, question, answer, created_at).
"""

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from app.core.config import QA_HISTORY_DB, QA_HISTORY_LIMIT

logger = logging.getLogger(__name__)

_ROOT = Path(__file__).resolve().parent.parent.parent
_TABLE = "qa_history"


def _db_path() -> Path:
    path = Path(QA_HISTORY_DB)
    return path if path.is_absolute() else _ROOT / path


def _get_conn() -> sqlite3.Connection:
    db_path = _db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    return conn


def init_db() -> None:
    """Create the qa_history table if it does not exist."""
    conn = _get_conn()
    try:
        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {_TABLE} (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                question TEXT NOT NULL,
                answer TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.commit()
    finally:
        conn.close()


def add_entry(question: str, answer: str) -> None:
    """Insert one question/answer pair."""
    init_db()
    conn = _get_conn()
    try:
        conn.execute(
            f"INSERT INTO {_TABLE} (question, answer, created_at) VALUES (?, ?, ?)",
            (question, answer, datetime.now(timezone.utc).isoformat()),
        )
        conn.commit()
        logger.info("[qa_history_db] added entry question_len=%d answer_len=%d", len(question), len(answer))
    finally:
        conn.close()


def get_recent(limit: int = QA_HISTORY_LIMIT) -> list[dict]:
    """Return the most recent entries, newest first."""
    init_db()
    conn = _get_conn()
    try:
        cur = conn.execute(
            f"SELECT id, question, answer, created_at FROM {_TABLE} ORDER BY id DESC LIMIT ?",
            (limit,),
        )
        return [dict(row) for row in cur.fetchall()]
    finally:
        conn.close()


def clear_all() -> None:
    """Delete all rows."""
    init_db()
    conn = _get_conn()
    try:
        conn.execute(f"DELETE FROM {_TABLE}")
        conn.commit()
        logger.info("[qa_history_db] cleared history")
    finally:
        conn.close()
