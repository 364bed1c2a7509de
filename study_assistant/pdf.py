from __future__ import annotations

import io
from typing import List

import fitz  # PyMuPDF
from PIL import Image
from PyPDF2 import PdfReader


PAGE_SEPARATOR = "\n\n"
RENDER_SCALE = 2.0


def extract_text_from_pdf_bytes(pdf_bytes: bytes) -> str:
    """
    Concatenate the embedded (selectable) text of every page, in page order,
    separated by a blank line. Parse errors propagate to the caller.
    """
    reader = PdfReader(io.BytesIO(pdf_bytes))
    chunks: List[str] = []
    for page in reader.pages:
        chunks.append(page.extract_text() or "")
    return PAGE_SEPARATOR.join(chunks).strip()


def open_pdf_document(pdf_bytes: bytes) -> fitz.Document:
    return fitz.open(stream=pdf_bytes, filetype="pdf")


def render_page_image(doc: fitz.Document, page_index: int, *, scale: float = RENDER_SCALE) -> Image.Image:
    """Render one page to an RGB PIL image for OCR input."""
    page = doc.load_page(page_index)
    mat = fitz.Matrix(scale, scale)
    pix = page.get_pixmap(matrix=mat, alpha=False)
    mode = "RGB" if pix.n == 3 else "L"
    img = Image.frombytes(mode, (pix.width, pix.height), pix.samples)
    if mode != "RGB":
        img = img.convert("RGB")
    return img
