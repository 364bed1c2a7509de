#!/usr/bin/env python3
"""
Run the upload ingestion pipeline on a local file and print the notes.

Usage:
    python scripts/extract_notes.py lecture.pdf --output notes.txt
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from study_assistant.ingest import ingest_upload
from study_assistant.ocr import TesseractEngine
from study_assistant.schemas import IngestionProgress
from study_assistant.settings import Settings, load_env_files


def _print_progress(progress: IngestionProgress) -> None:
    print(f"[{progress.percent:3d}%] {progress.status}", file=sys.stderr)


async def main_async(path: str, output: str, lang: str) -> int:
    settings = Settings.from_env()
    data = Path(path).read_bytes()

    def _engine() -> TesseractEngine:
        return TesseractEngine(lang=lang or settings.ocr_lang, tesseract_cmd=settings.tesseract_cmd)

    try:
        notes = await ingest_upload(Path(path).name, data, on_progress=_print_progress, engine_factory=_engine)
    except Exception as e:
        print(f"❌ Failed to read {path}: {e}", file=sys.stderr)
        return 1

    if not notes:
        print("⚠️ No text found in the document.", file=sys.stderr)

    if output:
        Path(output).write_text(notes, encoding="utf-8")
        print(f"✅ Wrote {len(notes)} chars to {output}", file=sys.stderr)
    else:
        print(notes)
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Extract study notes from a .txt or .pdf file")
    parser.add_argument("path", help="Input .txt or .pdf file")
    parser.add_argument("--output", default="", help="Write notes here instead of stdout")
    parser.add_argument("--lang", default="", help="Tesseract language for scanned PDFs (default: OCR_LANG or eng)")
    args = parser.parse_args()

    load_env_files()
    return asyncio.run(main_async(args.path, args.output, args.lang))


if __name__ == "__main__":
    raise SystemExit(main())
