from __future__ import annotations

import os
import shutil
import tempfile
from typing import Optional

import pytesseract
from PIL import Image


class OcrEngineError(RuntimeError):
    pass


class TesseractEngine:
    """
    Tesseract worker for one ingestion call.

    start() checks the binary and creates a scratch directory for page images;
    terminate() removes it. recognize() is only valid in between.
    """

    def __init__(self, *, lang: str = "eng", tesseract_cmd: Optional[str] = None, psm: str = "3") -> None:
        self._lang = lang or "eng"
        self._psm = psm
        self._tesseract_cmd = tesseract_cmd or ""
        self._workdir: Optional[str] = None
        self._pages = 0

    @property
    def running(self) -> bool:
        return self._workdir is not None

    def start(self) -> None:
        if self._tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self._tesseract_cmd
        try:
            pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError:
            raise OcrEngineError("Tesseract OCR is not installed or not on PATH. Set TESSERACT_CMD.") from None
        self._workdir = tempfile.mkdtemp(prefix="study-ocr-")

    def recognize(self, image: Image.Image) -> str:
        if self._workdir is None:
            raise OcrEngineError("OCR engine is not running.")
        self._pages += 1
        img_path = os.path.join(self._workdir, f"page_{self._pages:04d}.png")
        image.save(img_path)
        text = pytesseract.image_to_string(img_path, lang=self._lang, config=f"--psm {self._psm}")
        return (text or "").strip()

    def terminate(self) -> None:
        if self._workdir is not None:
            shutil.rmtree(self._workdir, ignore_errors=True)
        self._workdir = None
