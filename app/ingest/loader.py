# File bytes → text for uploaded documents. No chunking, no embeddings.
# Supports .txt, .md and .pdf.

import io
from pathlib import Path


def bytes_to_text(raw: bytes, filename: str) -> str:
    """
    Convert raw upload bytes to text by extension. PDFs are read page by page
    with pypdf; everything else is decoded as UTF-8.

    Raises ValueError when a PDF cannot be parsed.
    """
    ext = Path(filename).suffix.lower() if filename else ""
    if ext == ".pdf":
        return _read_pdf(raw)
    return raw.decode("utf-8", errors="replace")


def _read_pdf(raw: bytes) -> str:
    from pypdf import PdfReader

    try:
        reader = PdfReader(io.BytesIO(raw))
        return "\n".join(page.extract_text() or "" for page in reader.pages)
    except Exception as e:
        raise ValueError(f"Failed to process file: {e}") from e
