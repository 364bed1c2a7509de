from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

import fitz  # PyMuPDF
import pytest


class FakeResponse:
    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self._body = body

    async def text(self) -> str:
        return self._body

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc: Any) -> bool:
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession.post()."""

    def __init__(self, response: Optional[FakeResponse] = None, exc: Optional[BaseException] = None) -> None:
        self.response = response
        self.exc = exc
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((url, kwargs))
        if self.exc is not None:
            raise self.exc
        assert self.response is not None
        return self.response


class FakeEngine:
    """OCR engine double: returns canned text per page and records every call."""

    def __init__(self, texts: Sequence[str], *, fail_on: Optional[int] = None) -> None:
        self.texts = list(texts)
        self.fail_on = fail_on
        self.image_sizes: List[Tuple[int, int]] = []
        self.started = False
        self.terminated = False

    def start(self) -> None:
        self.started = True

    def recognize(self, image) -> str:
        idx = len(self.image_sizes)
        self.image_sizes.append(image.size)
        if self.fail_on == idx:
            raise RuntimeError("recognition blew up")
        return self.texts[idx]

    def terminate(self) -> None:
        self.terminated = True


def build_pdf(page_texts: Sequence[str], *, widths: Optional[Sequence[int]] = None) -> bytes:
    doc = fitz.open()
    for i, text in enumerate(page_texts):
        width = widths[i] if widths else 612
        page = doc.new_page(width=width, height=792)
        if text:
            page.insert_text((36, 72), text, fontsize=9)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def make_pdf():
    return build_pdf


@pytest.fixture
def fake_engine_cls():
    return FakeEngine


@pytest.fixture
def fake_session_cls():
    return FakeSession


@pytest.fixture
def fake_response_cls():
    return FakeResponse
