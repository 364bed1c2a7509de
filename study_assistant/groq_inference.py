from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import aiohttp

from study_assistant.settings import DEFAULT_GROQ_BASE_URL


GROQ_MODEL = "llama-3.1-8b-instant"
GROQ_TEMPERATURE = 0.3
EMPTY_COMPLETION = "No response."


class CompletionConfigError(RuntimeError):
    pass


class CompletionError(RuntimeError):
    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


def _extract_error_message(payload: Any, fallback: str) -> str:
    # OpenAI-compatible error shapes:
    # - {"error": {"message": "...", "type": "..."}}
    # - {"error": "..."}
    if isinstance(payload, dict):
        err = payload.get("error")
        if isinstance(err, dict):
            msg = err.get("message")
            if isinstance(msg, str) and msg.strip():
                return msg.strip()
        if isinstance(err, str) and err.strip():
            return err.strip()
    return fallback


def _extract_completion_text(payload: Any) -> str:
    if not isinstance(payload, dict):
        return EMPTY_COMPLETION
    choices = payload.get("choices")
    if isinstance(choices, list) and choices:
        first = choices[0]
        if isinstance(first, dict):
            message = first.get("message")
            if isinstance(message, dict):
                content = message.get("content")
                if isinstance(content, str):
                    return content
    return EMPTY_COMPLETION


class GroqCompletionClient:
    def __init__(
        self,
        *,
        session: aiohttp.ClientSession,
        api_key: Optional[str],
        base_url: str = DEFAULT_GROQ_BASE_URL,
        timeout_s: Optional[float] = None,
    ) -> None:
        self._api_key = (api_key or "").strip()
        if not self._api_key:
            raise CompletionConfigError("Missing GROQ_API_KEY in env.local")
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    async def _post(self, *, path: str, payload: Dict[str, Any]) -> Any:
        url = f"{self._base_url}{path}"
        timeout = aiohttp.ClientTimeout(total=self._timeout_s)
        try:
            async with self._session.post(url, json=payload, headers=self._headers(), timeout=timeout) as resp:
                text = await resp.text()
                try:
                    data = json.loads(text)
                except ValueError:
                    data = None
                if resp.status >= 400:
                    raise CompletionError(_extract_error_message(data, text[:300] or "Groq call failed"), status=resp.status)
                if data is None:
                    raise CompletionError(f"Groq non-JSON response ({resp.status}): {text[:300]}", status=resp.status)
                return data
        except CompletionError:
            raise
        except Exception as e:
            raise CompletionError(str(e) or "Groq call failed")

    async def complete(self, *, system: str, user: str) -> str:
        """One chat completion (system + user). No streaming, no retry."""
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ]
        payload = {
            "model": GROQ_MODEL,
            "messages": messages,
            "temperature": GROQ_TEMPERATURE,
        }
        data = await self._post(path="/chat/completions", payload=payload)
        return _extract_completion_text(data)
