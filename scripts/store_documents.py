#!/usr/bin/env python3
"""
Store local text files in the vector store, the same way POST /api/store does.

Run from project root:

    python scripts/store_documents.py notes.txt policy.md
    python scripts/store_documents.py --reset-history handbook.txt

Needs OPENAI_API_KEY and MILVUS_URI in .env.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Project root on path so "app" resolves
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from app.core.qa_history_db import clear_all
from app.services.document_service import store_text


async def _store_files(paths: list[Path]) -> int:
    skipped = 0
    for path in paths:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"  skipped: {path} ({e})")
            skipped += 1
            continue
        try:
            result = await store_text(text)
        except ValueError as e:
            print(f"  skipped: {path} ({e})")
            skipped += 1
            continue
        print(f"  stored: {path} -> {result.document_id} ({result.chunks_stored} chunks)")
    return skipped


def main() -> None:
    parser = argparse.ArgumentParser(description="Store text files as searchable documents.")
    parser.add_argument("files", nargs="+", type=Path, help="Text files to store.")
    parser.add_argument(
        "--reset-history",
        action="store_true",
        help="Clear the Q&A history before storing.",
    )
    args = parser.parse_args()

    if args.reset_history:
        clear_all()
        print("Cleared Q&A history.")

    skipped = asyncio.run(_store_files(args.files))
    print(f"Done. Stored {len(args.files) - skipped} of {len(args.files)} files.")
    if skipped:
        sys.exit(1)


if __name__ == "__main__":
    main()
