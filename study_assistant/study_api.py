from __future__ import annotations

import json
from typing import Any

import aiohttp


class StudyApiError(RuntimeError):
    pass


def _error_from_body(data: Any) -> str:
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, str) and err.strip():
            return err
    return "Something went wrong."


async def request_study(session: aiohttp.ClientSession, *, api_url: str, notes: str, mode: str) -> str:
    """
    POST {notes, mode} to the study route and return the generated markdown.
    Raises StudyApiError with a user-facing message on any failure.
    """
    try:
        async with session.post(api_url, json={"notes": notes, "mode": mode}) as resp:
            text = await resp.text()
            try:
                data = json.loads(text)
            except ValueError:
                data = None
            if resp.status >= 400:
                raise StudyApiError(_error_from_body(data))
    except StudyApiError:
        raise
    except Exception as e:
        raise StudyApiError(str(e) or "Network error.")

    if not isinstance(data, dict) or not isinstance(data.get("result"), str):
        raise StudyApiError("Something went wrong.")
    return data["result"]
