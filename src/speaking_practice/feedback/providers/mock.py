from __future__ import annotations

from typing import Optional

from ..rubric import RubricConfig
from .base import FeedbackProvider


class MockFeedbackProvider(FeedbackProvider):
    name = "mock"

    async def critique(self, *, transcript: str, rubric: RubricConfig, prompt: Optional[str] = None) -> str:
        words = len(transcript.split())
        lines = [f"{label}: mock feedback for a {words}-word answer." for label in rubric.categories]
        return "\n".join(lines)
