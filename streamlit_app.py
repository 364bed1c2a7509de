"""
Streamlit front end for the AI Study Assistant.

To run (with the API server up, see app.py):
    streamlit run streamlit_app.py

The page posts notes to STUDY_API_URL; the Groq key never reaches the browser.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
from datetime import datetime

import aiohttp
import streamlit as st

from study_assistant.history import HistoryStore
from study_assistant.ingest import ingest_upload
from study_assistant.modes import MODE_DESCRIPTIONS, MODE_LABELS, MODE_ORDER
from study_assistant.ocr import TesseractEngine
from study_assistant.session import StudySession
from study_assistant.settings import Settings, load_env_files
from study_assistant.study_api import StudyApiError, request_study

# Load environment
load_env_files()
SETTINGS = Settings.from_env()

# Page config
st.set_page_config(
    page_title="AI Study Assistant",
    page_icon="📚",
    layout="wide",
    initial_sidebar_state="collapsed",
)

st.markdown("""
<style>
.history-meta {
    font-size: 0.75rem;
    color: #71717a;
    text-transform: uppercase;
    letter-spacing: 0.05em;
}
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Run async function in Streamlit with proper event loop handling."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        # No running loop, safe to use asyncio.run()
        return asyncio.run(coro)
    try:
        import nest_asyncio
        nest_asyncio.apply()
    except ImportError:
        pass
    with concurrent.futures.ThreadPoolExecutor() as executor:
        future = executor.submit(asyncio.run, coro)
        return future.result()


def _state() -> StudySession:
    if "study" not in st.session_state:
        st.session_state.study = StudySession(history=HistoryStore(SETTINGS.history_path))
    state = st.session_state.study
    if "notes_input" not in st.session_state:
        st.session_state.notes_input = state.notes
    if "mode_input" not in st.session_state:
        st.session_state.mode_input = state.mode
    return state


def _sync_widgets(state: StudySession) -> None:
    # Only valid before the widgets render, or from a callback.
    st.session_state.notes_input = state.notes
    st.session_state.mode_input = state.mode


def _on_clear() -> None:
    state = _state()
    state.clear()
    _sync_widgets(state)


def _on_restore(entry_id: str) -> None:
    state = _state()
    state.restore(entry_id)
    _sync_widgets(state)


def _on_delete(entry_id: str) -> None:
    _state().history.remove(entry_id)


def _on_clear_history() -> None:
    _state().history.clear()


def _on_toggle_focus() -> None:
    _state().toggle_focus()


def _engine_factory() -> TesseractEngine:
    return TesseractEngine(lang=SETTINGS.ocr_lang, tesseract_cmd=SETTINGS.tesseract_cmd)


def _handle_upload(state: StudySession, uploaded) -> None:
    progress_bar = st.progress(0)
    status_text = st.empty()

    def _on_progress(progress) -> None:
        state.set_progress(progress)
        progress_bar.progress(progress.percent)
        status_text.text(progress.status)

    state.begin_upload()
    try:
        notes = run_async(
            ingest_upload(
                uploaded.name,
                uploaded.getvalue(),
                on_progress=_on_progress,
                engine_factory=_engine_factory,
            )
        )
    except Exception as e:
        state.finish_upload(error=str(e) or "Failed to read file.")
    else:
        state.finish_upload(notes)
        st.session_state.notes_input = state.notes
    finally:
        # A rerun or stop raised mid-upload skips both branches above.
        if state.loading:
            state.abort_upload()
        progress_bar.empty()
        status_text.empty()


async def _generate(notes: str, mode: str) -> str:
    async with aiohttp.ClientSession() as session:
        return await request_study(session, api_url=SETTINGS.study_api_url, notes=notes, mode=mode)


def _render_input(state: StudySession) -> None:
    st.subheader("Input")
    st.caption("Tip: include definitions, formulas, and a small example if you have one.")

    st.radio(
        "Mode",
        MODE_ORDER,
        key="mode_input",
        format_func=lambda m: MODE_LABELS[m],
        captions=[MODE_DESCRIPTIONS[m] for m in MODE_ORDER],
        horizontal=True,
        disabled=state.loading,
    )
    state.mode = st.session_state.mode_input

    uploaded = st.file_uploader("Import .txt / .pdf", type=["txt", "pdf"], disabled=state.loading)
    if uploaded is not None and uploaded.file_id != state.last_upload_id:
        state.last_upload_id = uploaded.file_id
        _handle_upload(state, uploaded)

    st.text_area("Your notes", key="notes_input", height=240, placeholder=state.placeholder)
    state.notes = st.session_state.notes_input
    st.caption(f"{state.char_count} chars · Minimum: 10 characters. Your key stays on the server (not in the browser).")

    col1, col2 = st.columns(2)
    with col1:
        run_clicked = st.button(
            "Generating…" if state.loading else "Run",
            type="primary",
            disabled=not state.can_run,
            use_container_width=True,
        )
    with col2:
        st.button("Clear", on_click=_on_clear, use_container_width=True)

    if run_clicked:
        state.begin_run()
        with st.spinner("Generating output…"):
            try:
                result = run_async(_generate(state.notes, state.mode))
            except StudyApiError as e:
                state.fail_run(str(e))
            else:
                state.finish_run(result)
            finally:
                # Rerun or stop raised mid-request.
                if state.loading:
                    state.cancel_run()

    if state.error:
        st.error(state.error)


def _render_output(state: StudySession) -> None:
    head, actions = st.columns([3, 2])
    with head:
        st.subheader("Output")
        st.caption("Copy it into your notes or a Google Doc.")
    with actions:
        st.button(
            "Show Input" if state.focus_output else "Focus Output",
            on_click=_on_toggle_focus,
            help="Expand/collapse output",
        )
        st.download_button(
            "Download .md",
            data=state.output,
            file_name=f"study-{state.mode}.md",
            mime="text/markdown",
            disabled=not state.output,
        )

    with st.container(border=True):
        if state.output:
            st.markdown(state.output)
            with st.expander("Copy markdown"):
                st.code(state.output, language="markdown")
        else:
            st.markdown("**Nothing yet.**")
            st.caption("Paste notes on the left, pick a mode, and click **Run**.")
            st.caption(
                "Example notes to try:\n"
                "- Derivative rules (power/product/chain)\n"
                "- Acid/base strength + pH calculations\n"
                "- Memory allocation in C (malloc/calloc/free)"
            )

    _render_history(state)


def _render_history(state: StudySession) -> None:
    head, clear = st.columns([3, 1])
    with head:
        st.markdown("**History**")
    with clear:
        st.button("Clear history", on_click=_on_clear_history, disabled=len(state.history) == 0)

    entries = state.history.entries
    if not entries:
        st.caption("No history yet. Run something and it’ll appear here.")
        return

    for entry in entries:
        with st.container(border=True):
            body, buttons = st.columns([4, 1])
            with body:
                stamp = datetime.fromtimestamp(entry.created_at / 1000).strftime("%Y-%m-%d %H:%M")
                st.markdown(f"<span class='history-meta'>{entry.mode} · {stamp}</span>", unsafe_allow_html=True)
                st.text(entry.preview())
            with buttons:
                st.button("Open", key=f"open_{entry.id}", on_click=_on_restore, args=(entry.id,))
                st.button("Delete", key=f"delete_{entry.id}", on_click=_on_delete, args=(entry.id,), help="Delete this item")


def main():
    state = _state()

    st.title("📚 AI Study Assistant")
    st.markdown("*Paste your notes, choose a mode, and generate explanations, quizzes, or practice problems.*")

    if state.focus_output:
        _render_output(state)
        return

    left, right = st.columns(2)
    with left:
        _render_input(state)
    with right:
        _render_output(state)


if __name__ == "__main__":
    main()
