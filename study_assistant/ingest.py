"""
Upload ingestion: .txt is read verbatim, .pdf goes through embedded-text
extraction with an OCR fallback for scanned documents.

Every blocking library call runs in a worker thread; pages are processed
strictly one after another so progress can be published between them.
"""
from __future__ import annotations

import asyncio
import math
from typing import Callable, List, Optional

from study_assistant.ocr import TesseractEngine
from study_assistant.pdf import PAGE_SEPARATOR, extract_text_from_pdf_bytes, open_pdf_document, render_page_image
from study_assistant.schemas import IngestionProgress


MIN_EMBEDDED_TEXT_CHARS = 50
OCR_SECONDS_PER_PAGE = 8
OCR_SECONDS_OVERHEAD = 10

ProgressCallback = Callable[[IngestionProgress], None]
EngineFactory = Callable[[], TesseractEngine]


class IngestionError(RuntimeError):
    pass


class UnsupportedFileError(IngestionError):
    pass


def estimate_ocr_minutes(page_count: int) -> int:
    seconds = page_count * OCR_SECONDS_PER_PAGE + OCR_SECONDS_OVERHEAD
    return max(1, math.ceil(seconds / 60))


def progress_percent(done: int, total: int) -> int:
    if total <= 0:
        return 0
    # Half-up, not banker's rounding.
    return int(math.floor(done / total * 100 + 0.5))


def _emit(on_progress: Optional[ProgressCallback], status: str, percent: int) -> None:
    if on_progress is not None:
        on_progress(IngestionProgress(status=status, percent=percent))


def decode_text_file(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


async def ocr_pdf_bytes(
    pdf_bytes: bytes,
    *,
    on_progress: Optional[ProgressCallback] = None,
    engine_factory: EngineFactory = TesseractEngine,
) -> str:
    doc = await asyncio.to_thread(open_pdf_document, pdf_bytes)
    try:
        engine = engine_factory()
        try:
            total = doc.page_count
            minutes = estimate_ocr_minutes(total)
            _emit(
                on_progress,
                f"Scanned PDF detected. Running OCR on {total} page(s), this may take about {minutes} min…",
                0,
            )
            await asyncio.to_thread(engine.start)

            chunks: List[str] = []
            for i in range(total):
                # Reported before the page runs, so the readout trails by one page.
                _emit(on_progress, f"OCR page {i + 1} of {total}…", progress_percent(i, total))
                image = await asyncio.to_thread(render_page_image, doc, i)
                text = await asyncio.to_thread(engine.recognize, image)
                chunks.append(text or "")

            _emit(on_progress, "OCR complete.", 100)
            return PAGE_SEPARATOR.join(chunks).strip()
        finally:
            engine.terminate()
    finally:
        doc.close()


async def ingest_pdf_bytes(
    pdf_bytes: bytes,
    *,
    on_progress: Optional[ProgressCallback] = None,
    engine_factory: EngineFactory = TesseractEngine,
) -> str:
    _emit(on_progress, "Reading PDF…", 0)
    text = await asyncio.to_thread(extract_text_from_pdf_bytes, pdf_bytes)
    if len(text) >= MIN_EMBEDDED_TEXT_CHARS:
        _emit(on_progress, "Text extracted.", 100)
        return text
    return await ocr_pdf_bytes(pdf_bytes, on_progress=on_progress, engine_factory=engine_factory)


async def ingest_upload(
    filename: str,
    data: bytes,
    *,
    on_progress: Optional[ProgressCallback] = None,
    engine_factory: EngineFactory = TesseractEngine,
) -> str:
    """
    Turn an uploaded file into note text.
    Raises UnsupportedFileError for anything but .txt/.pdf; parser, renderer and
    OCR errors propagate unchanged.
    """
    name = (filename or "").lower()
    if name.endswith(".txt"):
        return decode_text_file(data)
    if name.endswith(".pdf"):
        return await ingest_pdf_bytes(data, on_progress=on_progress, engine_factory=engine_factory)
    raise UnsupportedFileError("Please upload a .txt or .pdf file.")
