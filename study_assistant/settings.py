from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


ROOT = Path(__file__).resolve().parent.parent

DEFAULT_GROQ_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_STUDY_API_URL = "http://localhost:8000/api/study"


def load_env_files(root: Path = ROOT) -> Optional[str]:
    """
    Load the first env file found (supports env.local to keep secrets out of git).
    Already-set environment variables win.
    """
    candidates = [
        os.getenv("STUDY_AI_ENV_FILE") or "",
        str(root / "env.local"),
        str(root / ".env"),
    ]
    for p in candidates:
        if p and os.path.exists(p):
            load_dotenv(dotenv_path=p, override=False)
            return p
    return None


def _optional_float(raw: Optional[str]) -> Optional[float]:
    raw = (raw or "").strip()
    if not raw:
        return None
    value = float(raw)
    return value if value > 0 else None


@dataclass(frozen=True)
class Settings:
    groq_api_key: str = ""
    groq_base_url: str = DEFAULT_GROQ_BASE_URL
    completion_timeout_s: Optional[float] = None
    study_api_url: str = DEFAULT_STUDY_API_URL
    history_path: str = str(ROOT / ".cache" / "history.json")
    tesseract_cmd: str = ""
    ocr_lang: str = "eng"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            groq_api_key=(os.getenv("GROQ_API_KEY") or "").strip(),
            groq_base_url=(os.getenv("GROQ_BASE_URL") or "").strip() or DEFAULT_GROQ_BASE_URL,
            completion_timeout_s=_optional_float(os.getenv("COMPLETION_TIMEOUT_S")),
            study_api_url=(os.getenv("STUDY_API_URL") or "").strip() or DEFAULT_STUDY_API_URL,
            history_path=(os.getenv("STUDY_HISTORY_PATH") or "").strip() or str(ROOT / ".cache" / "history.json"),
            tesseract_cmd=(os.getenv("TESSERACT_CMD") or "").strip(),
            ocr_lang=(os.getenv("OCR_LANG") or "").strip() or "eng",
        )
