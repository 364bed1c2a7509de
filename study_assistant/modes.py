from __future__ import annotations

from typing import Dict, List, Literal


Mode = Literal["explain", "quiz", "practice"]


MODE_ORDER: List[str] = [
    "explain",
    "quiz",
    "practice",
]


MODE_LABELS: Dict[str, str] = {
    "explain": "Explain",
    "quiz": "Quiz",
    "practice": "Practice",
}


MODE_DESCRIPTIONS: Dict[str, str] = {
    "explain": "Step-by-step explanation + examples",
    "quiz": "MCQ + short answer + answer key",
    "practice": "5 problems (easy → hard) + solutions",
}


MODE_PLACEHOLDERS: Dict[str, str] = {
    "explain": "Paste your notes… (e.g., derivative rules, chem concepts, etc.)",
    "quiz": "Paste notes… I’ll turn them into a quiz with answers.",
    "practice": "Paste notes… I’ll generate practice problems with solutions.",
}
