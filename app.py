from __future__ import annotations

import os
import sys
from typing import Optional

import aiohttp
from quart import Quart, jsonify, request

from study_assistant.groq_inference import CompletionConfigError, CompletionError, GroqCompletionClient
from study_assistant.prompts import build_prompt
from study_assistant.schemas import ErrorResponse, StudyRequestError, StudyResponse, parse_study_request
from study_assistant.settings import Settings, load_env_files


# --- Env loading (supports env.local to keep secrets out of git) ---
load_env_files()


app = Quart(__name__)
app.config["MAX_CONTENT_LENGTH"] = 25 * 1024 * 1024  # 25MB


_aiohttp_session: Optional[aiohttp.ClientSession] = None


@app.before_serving
async def _startup() -> None:
    global _aiohttp_session
    _aiohttp_session = aiohttp.ClientSession()


@app.after_serving
async def _shutdown() -> None:
    global _aiohttp_session
    if _aiohttp_session:
        await _aiohttp_session.close()
    _aiohttp_session = None


def _session() -> aiohttp.ClientSession:
    if _aiohttp_session is None:
        raise RuntimeError("HTTP session not initialized.")
    return _aiohttp_session


def _json_error(message: str, *, status: int = 400, code: str = "bad_request"):
    return jsonify(ErrorResponse(error=message, code=code).model_dump()), status


@app.get("/health")
async def health():
    return jsonify({"ok": True})


@app.post("/api/study")
async def study():
    body = await request.get_json(silent=True)
    try:
        study_req = parse_study_request(body)
    except StudyRequestError as e:
        return _json_error(str(e), status=400)

    settings = Settings.from_env()
    try:
        client = GroqCompletionClient(
            session=_session(),
            api_key=settings.groq_api_key,
            base_url=settings.groq_base_url,
            timeout_s=settings.completion_timeout_s,
        )
        prompt = build_prompt(study_req.notes, study_req.mode)
        result = await client.complete(system=prompt.system, user=prompt.user)
    except CompletionConfigError as e:
        return _json_error(str(e), status=500, code="completion_config")
    except CompletionError as e:
        print(f"STUDY AI completion failed: {e}", file=sys.stderr)
        return _json_error(str(e), status=500, code="upstream_error")
    except Exception as e:
        print(f"STUDY AI server error: {type(e).__name__}: {e}", file=sys.stderr)
        return _json_error(str(e) or "Server error", status=500, code="server_error")

    return jsonify(StudyResponse(result=result).model_dump())


if __name__ == "__main__":
    port = int(os.getenv("PORT") or "8000")
    app.run(host="0.0.0.0", port=port, debug=(os.getenv("APP_ENV") == "development"))
