from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..settings import FeedbackSettings

DEFAULT_CATEGORIES = ("Grammar", "Pronunciation", "Fluency", "Task Completion", "Overall")


@dataclass(frozen=True)
class RubricConfig:
    categories: tuple[str, ...] = DEFAULT_CATEGORIES
    word_budget: int = 200
    max_tokens: int = 600

    @classmethod
    def from_settings(cls, cfg: FeedbackSettings) -> "RubricConfig":
        return cls(word_budget=cfg.word_budget, max_tokens=cfg.max_tokens)


def build_system_instruction(rubric: RubricConfig) -> str:
    headings = "\n".join(f"{label}: <feedback>" for label in rubric.categories)
    return (
        "You are an ESL speaking examiner giving feedback to a college student.\n"
        "You only receive a transcript of the recording, so judge pronunciation "
        "from cues in the transcript such as misrecognised or repeated words.\n"
        f"Answer with exactly these {len(rubric.categories)} sections, in this order, "
        "each label on its own line followed by one or two short sentences:\n"
        f"{headings}\n"
        "In the Overall section give a band from 1 to 5 and one tip for next time.\n"
        f"Keep the whole answer under {rubric.word_budget} words. Use simple English."
    )


def build_user_message(transcript: str, prompt: Optional[str] = None) -> str:
    parts = ["Analyze the following student's speech."]
    if prompt and prompt.strip():
        parts.append(f"Speaking task:\n{prompt.strip()}")
    parts.append(f"Transcript:\n{transcript.strip()}")
    return "\n\n".join(parts)


def build_messages(transcript: str, rubric: RubricConfig, prompt: Optional[str] = None) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": build_system_instruction(rubric)},
        {"role": "user", "content": build_user_message(transcript, prompt)},
    ]
