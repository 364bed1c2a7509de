from __future__ import annotations

import os

from study_assistant.settings import DEFAULT_GROQ_BASE_URL, DEFAULT_STUDY_API_URL, Settings, load_env_files


ENV_VARS = [
    "GROQ_API_KEY",
    "GROQ_BASE_URL",
    "COMPLETION_TIMEOUT_S",
    "STUDY_API_URL",
    "STUDY_HISTORY_PATH",
    "TESSERACT_CMD",
    "OCR_LANG",
]


def _clear(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch):
    _clear(monkeypatch)
    s = Settings.from_env()
    assert s.groq_api_key == ""
    assert s.groq_base_url == DEFAULT_GROQ_BASE_URL
    assert s.completion_timeout_s is None
    assert s.study_api_url == DEFAULT_STUDY_API_URL
    assert s.history_path.endswith(os.path.join(".cache", "history.json"))
    assert s.ocr_lang == "eng"


def test_overrides(monkeypatch, tmp_path):
    _clear(monkeypatch)
    monkeypatch.setenv("GROQ_API_KEY", "  gsk_test  ")
    monkeypatch.setenv("COMPLETION_TIMEOUT_S", "30")
    monkeypatch.setenv("STUDY_HISTORY_PATH", str(tmp_path / "h.json"))
    monkeypatch.setenv("OCR_LANG", "fra")
    s = Settings.from_env()
    assert s.groq_api_key == "gsk_test"
    assert s.completion_timeout_s == 30.0
    assert s.history_path == str(tmp_path / "h.json")
    assert s.ocr_lang == "fra"


def test_non_positive_timeout_means_none(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("COMPLETION_TIMEOUT_S", "0")
    assert Settings.from_env().completion_timeout_s is None


def test_env_file_does_not_override_existing(monkeypatch, tmp_path):
    _clear(monkeypatch)
    env_file = tmp_path / "custom.env"
    env_file.write_text("GROQ_API_KEY=from-file\nOCR_LANG=spa\n", encoding="utf-8")
    monkeypatch.setenv("STUDY_AI_ENV_FILE", str(env_file))
    monkeypatch.setenv("OCR_LANG", "eng")

    assert load_env_files(tmp_path) == str(env_file)
    assert os.environ["GROQ_API_KEY"] == "from-file"
    assert os.environ["OCR_LANG"] == "eng"
    os.environ.pop("GROQ_API_KEY", None)
