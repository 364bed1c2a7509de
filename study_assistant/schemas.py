from __future__ import annotations

import time
import uuid
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from study_assistant.modes import Mode


MIN_NOTES_CHARS = 10
NOTES_ERROR = f"Please provide at least {MIN_NOTES_CHARS} characters of notes."
MODE_ERROR = "Invalid mode."


class StudyRequestError(ValueError):
    pass


class StudyRequest(BaseModel):
    notes: str
    mode: Mode

    @field_validator("notes")
    @classmethod
    def _long_enough(cls, v: str) -> str:
        # Notes are forwarded untouched; only the length check looks at the trimmed text.
        if len(v.strip()) < MIN_NOTES_CHARS:
            raise ValueError(NOTES_ERROR)
        return v


def parse_study_request(body: Any) -> StudyRequest:
    """
    Validate a raw JSON body into a StudyRequest.
    Raises StudyRequestError with the user-facing message of the first bad field
    (notes are checked before mode).
    """
    if not isinstance(body, dict):
        body = {}
    try:
        return StudyRequest.model_validate(body, strict=True)
    except ValidationError as e:
        first = e.errors()[0]
        field = first["loc"][0] if first.get("loc") else ""
        raise StudyRequestError(NOTES_ERROR if field == "notes" else MODE_ERROR) from None


class StudyResponse(BaseModel):
    ok: bool = True
    result: str


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str
    code: str = "bad_request"


class HistoryEntry(BaseModel):
    id: str
    created_at: int
    mode: Mode
    notes: str
    output: str

    @classmethod
    def create(cls, *, mode: str, notes: str, output: str, now_ms: Optional[int] = None) -> "HistoryEntry":
        return cls(
            id=uuid.uuid4().hex,
            created_at=int(time.time() * 1000) if now_ms is None else int(now_ms),
            mode=mode,
            notes=notes,
            output=output,
        )

    def preview(self, max_len: int = 140) -> str:
        return self.notes[:max_len] or "(empty notes)"


class IngestionProgress(BaseModel):
    status: str = ""
    percent: int = Field(default=0, ge=0, le=100)
