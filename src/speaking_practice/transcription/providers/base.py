from __future__ import annotations

import abc

from ..types import TranscriptionOptions, TranscriptionResult


class TranscriptionProvider(abc.ABC):
    """Interface for speech-to-text providers."""

    name: str

    @abc.abstractmethod
    async def transcribe(self, *, audio: bytes, options: TranscriptionOptions) -> TranscriptionResult:
        """Produce a same-language transcription for the provided audio."""
        raise NotImplementedError

    async def close(self) -> None:
        """Allow provider to cleanup resources if needed."""
        return None
