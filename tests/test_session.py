from __future__ import annotations

import pytest

from study_assistant.history import HistoryStore
from study_assistant.schemas import IngestionProgress
from study_assistant.session import StudySession


@pytest.fixture
def state(tmp_path):
    return StudySession(history=HistoryStore(tmp_path / "history.json"))


def test_can_run_needs_ten_trimmed_chars(state):
    state.notes = "   short   "
    assert state.can_run is False
    state.notes = "long enough notes"
    assert state.can_run is True
    state.loading = True
    assert state.can_run is False


def test_placeholder_follows_mode(state):
    state.mode = "quiz"
    assert "quiz" in state.placeholder


def test_successful_run_records_history(state):
    state.mode = "practice"
    state.notes = "Newton's laws of motion"
    state.begin_run()
    entry = state.finish_run("## Practice Problems")

    assert state.output == "## Practice Problems"
    assert state.loading is False
    assert state.history.entries == [entry]
    assert entry.mode == "practice"
    assert entry.notes == "Newton's laws of motion"


def test_failed_run_leaves_history_alone(state):
    state.notes = "Newton's laws of motion"
    state.begin_run()
    state.fail_run("Rate limit exceeded")

    assert state.error == "Rate limit exceeded"
    assert state.output == ""
    assert len(state.history) == 0


def test_failed_upload_keeps_previous_notes(state):
    state.notes = "existing notes"
    state.begin_upload()
    state.set_progress(IngestionProgress(status="OCR page 1 of 2…", percent=0))
    state.finish_upload(error="Invalid PDF header")

    assert state.notes == "existing notes"
    assert state.error == "Invalid PDF header"
    assert state.progress == IngestionProgress()


def test_successful_upload_replaces_notes_even_when_empty(state):
    state.notes = "existing notes"
    state.begin_upload()
    state.finish_upload("")
    assert state.notes == ""
    assert state.error == ""


def test_restore_brings_back_mode_notes_and_output(state):
    state.mode = "quiz"
    state.notes = "Cell biology basics"
    entry = state.finish_run("## Quiz")
    state.mode = "explain"
    state.clear()
    state.error = "stale"

    state.restore(entry.id)

    assert (state.mode, state.notes, state.output, state.error) == ("quiz", "Cell biology basics", "## Quiz", "")


def test_toggle_focus(state):
    state.toggle_focus()
    assert state.focus_output is True
    state.toggle_focus()
    assert state.focus_output is False


def test_aborted_upload_releases_loading_and_forgets_file(state):
    state.notes = "existing notes"
    state.last_upload_id = "file-1"
    state.begin_upload()
    state.set_progress(IngestionProgress(status="OCR page 1 of 2…", percent=0))

    state.abort_upload()

    assert state.loading is False
    assert state.last_upload_id is None
    assert state.notes == "existing notes"
    assert state.progress == IngestionProgress()
    assert state.can_run is True


def test_cancelled_run_releases_loading_without_history(state):
    state.notes = "Photosynthesis converts light"
    state.begin_run()
    state.cancel_run()
    assert state.loading is False
    assert state.output == ""
    assert len(state.history) == 0
