from __future__ import annotations

from dataclasses import dataclass

from study_assistant.modes import Mode


SYSTEM_INSTRUCTION = """You are a helpful study assistant. Be clear, step-by-step, and student-friendly.

FORMATTING RULES:
- Answer in Markdown.
- Use headings (##) for each section and bullet points when useful.
- Explain mode: an "Explanation" section first, then an "Example Questions" section with worked solutions.
- Quiz mode: a "Quiz" section first, then an "Answer Key" section.
- Practice mode: a "Practice Problems" section ordered from easiest to hardest, then a "Solutions" section.""".strip()


USER_TEMPLATES = {
    "explain": "Explain these notes step-by-step. Then give 3 example questions with worked solutions.",
    "quiz": "Create a quiz from these notes: 8 multiple choice and 3 short answer. Include an answer key.",
    "practice": "Generate 5 practice problems based on these notes (easy → harder). Provide worked solutions for each.",
}


@dataclass(frozen=True)
class StudyPrompt:
    system: str
    user: str


def build_prompt(notes: str, mode: Mode) -> StudyPrompt:
    """Compose the system + user messages. Notes are interpolated verbatim."""
    instruction = USER_TEMPLATES[mode]
    return StudyPrompt(system=SYSTEM_INSTRUCTION, user=f"{instruction}\n\nNOTES:\n{notes}")
