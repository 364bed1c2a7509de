"""
Local, capacity-bounded history of successful runs, kept as a keyed JSON file.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Union

from pydantic import ValidationError

from study_assistant.schemas import HistoryEntry


HISTORY_KEY = "ai_study_assistant_history_v1"
HISTORY_LIMIT = 20


def _read_store(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


class HistoryStore:
    def __init__(self, path: Union[str, Path], *, key: str = HISTORY_KEY, limit: int = HISTORY_LIMIT) -> None:
        self._path = Path(path)
        self._key = key
        self._limit = int(limit)
        self._entries: List[HistoryEntry] = []
        self.load()

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def load(self) -> None:
        raw = _read_store(self._path).get(self._key)
        entries: List[HistoryEntry] = []
        if isinstance(raw, list):
            for item in raw:
                try:
                    entries.append(HistoryEntry.model_validate(item))
                except ValidationError:
                    continue
        self._entries = entries[: self._limit]

    def append(self, entry: HistoryEntry) -> None:
        # newest first, keep the last `limit`
        self._entries = [entry, *self._entries][: self._limit]
        self._persist()

    def remove(self, entry_id: str) -> None:
        self._entries = [e for e in self._entries if e.id != entry_id]
        self._persist()

    def clear(self) -> None:
        self._entries = []
        self._persist()

    def get(self, entry_id: str) -> HistoryEntry:
        for e in self._entries:
            if e.id == entry_id:
                return e
        raise KeyError(entry_id)

    def _persist(self) -> None:
        store = _read_store(self._path)
        store[self._key] = [e.model_dump() for e in self._entries]
        try:
            os.makedirs(self._path.parent, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(store, f, ensure_ascii=False)
            os.replace(tmp, self._path)
        except OSError:
            pass  # Persistence failures shouldn't break the app; memory stays authoritative.
