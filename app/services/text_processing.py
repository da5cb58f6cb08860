"""
Text processing for stored documents: cleaning and chunking before embedding.
"""

import re
import unicodedata


def clean_text(text: str) -> str:
    """
    Normalize raw text submitted to /api/store.

    NFKC-normalizes, strips every line, collapses consecutive duplicate lines,
    and keeps at most one blank line between paragraphs.
    """
    if not text or not text.strip():
        return ""
    text = unicodedata.normalize("NFKC", text)
    result: list[str] = []
    previous: str | None = None
    for line in (raw.strip() for raw in text.splitlines()):
        if line == previous:
            continue
        previous = line
        if line == "" and (not result or result[-1] == ""):
            continue
        result.append(line)
    return "\n".join(result).strip()


def _overlap_tail(parts: list[str], overlap: int) -> list[str]:
    """Trailing parts of a finished chunk that fit in `overlap` characters."""
    tail: list[str] = []
    size = 0
    for part in reversed(parts):
        if size + len(part) + 1 > overlap:
            break
        tail.append(part)
        size += len(part) + 1
    tail.reverse()
    return tail


def _joined_len(parts: list[str]) -> int:
    return sum(len(p) for p in parts) + max(0, len(parts) - 1)


def chunk_text(text: str, chunk_size: int = 500, overlap: int = 50) -> list[str]:
    """
    Split text into sentence-aware chunks of at most chunk_size characters.

    Consecutive chunks share up to `overlap` characters of whole sentences (or words,
    for sentences longer than chunk_size). The overlap shrinks when the next sentence
    would not fit beside it. Words are never cut, so a single word longer than
    chunk_size is the only way to exceed it.
    """
    if not text or not text.strip():
        return []
    text = text.strip()
    if len(text) <= chunk_size:
        return [text]

    sentences = [s.strip() for s in re.split(r"(?<=[.!?])\s+", text) if s.strip()]
    if not sentences:
        sentences = text.split()

    chunks: list[str] = []
    current: list[str] = []
    fresh = 0  # parts added since the last flush

    def add(part: str) -> None:
        nonlocal fresh
        current.append(part)
        fresh += 1

    def flush() -> None:
        nonlocal current, fresh
        if fresh:
            chunks.append(" ".join(current))
            current = _overlap_tail(current, overlap)
            fresh = 0

    def make_room(part: str) -> None:
        # Drop leading overlap parts until part fits
        while current and _joined_len(current + [part]) > chunk_size:
            current.pop(0)

    for sent in sentences:
        if _joined_len(current + [sent]) <= chunk_size:
            add(sent)
            continue
        flush()
        if len(sent) <= chunk_size:
            make_room(sent)
            add(sent)
            continue
        # Oversized sentence: fall back to word packing
        for word in sent.split():
            if current and _joined_len(current + [word]) > chunk_size:
                flush()
                make_room(word)
            add(word)

    if fresh:
        chunks.append(" ".join(current))
    return chunks
