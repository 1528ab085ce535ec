from __future__ import annotations

import abc
from typing import Optional

from ..rubric import RubricConfig


class FeedbackProvider(abc.ABC):
    """Interface for language-feedback providers."""

    name: str

    @abc.abstractmethod
    async def critique(self, *, transcript: str, rubric: RubricConfig, prompt: Optional[str] = None) -> str:
        """Return structured free-text feedback for the transcript."""
        raise NotImplementedError

    async def close(self) -> None:
        """Allow provider to cleanup resources if needed."""
        return None
