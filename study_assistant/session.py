from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from study_assistant.history import HistoryStore
from study_assistant.modes import MODE_PLACEHOLDERS
from study_assistant.schemas import MIN_NOTES_CHARS, HistoryEntry, IngestionProgress


@dataclass
class StudySession:
    """UI state for one browser session. Widgets read from it; callbacks mutate it."""

    history: HistoryStore
    mode: str = "explain"
    notes: str = ""
    output: str = ""
    error: str = ""
    loading: bool = False
    focus_output: bool = False
    progress: IngestionProgress = field(default_factory=IngestionProgress)
    last_upload_id: Optional[str] = None

    @property
    def char_count(self) -> int:
        return len(self.notes)

    @property
    def placeholder(self) -> str:
        return MODE_PLACEHOLDERS.get(self.mode, MODE_PLACEHOLDERS["practice"])

    @property
    def can_run(self) -> bool:
        return not self.loading and len(self.notes.strip()) >= MIN_NOTES_CHARS

    def reset_progress(self) -> None:
        self.progress = IngestionProgress()

    def set_progress(self, progress: IngestionProgress) -> None:
        self.progress = progress

    def begin_upload(self) -> None:
        self.error = ""
        self.loading = True
        self.reset_progress()

    def finish_upload(self, notes: Optional[str] = None, *, error: str = "") -> None:
        # On failure the previous notes stay untouched.
        if notes is not None and not error:
            self.notes = notes
        self.error = error
        self.loading = False
        self.reset_progress()

    def abort_upload(self) -> None:
        # Upload never finished: keep prior notes and let the same file be picked up again.
        self.loading = False
        self.last_upload_id = None
        self.reset_progress()

    def begin_run(self) -> None:
        self.loading = True
        self.error = ""
        self.output = ""

    def finish_run(self, result: str) -> HistoryEntry:
        self.output = result
        self.loading = False
        entry = HistoryEntry.create(mode=self.mode, notes=self.notes, output=result)
        self.history.append(entry)
        return entry

    def fail_run(self, message: str) -> None:
        self.error = message
        self.loading = False

    def cancel_run(self) -> None:
        self.loading = False

    def clear(self) -> None:
        self.notes = ""
        self.output = ""
        self.error = ""

    def restore(self, entry_id: str) -> None:
        entry = self.history.get(entry_id)
        self.mode = entry.mode
        self.notes = entry.notes
        self.output = entry.output
        self.error = ""

    def toggle_focus(self) -> None:
        self.focus_output = not self.focus_output
