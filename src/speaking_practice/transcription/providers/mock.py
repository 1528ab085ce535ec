from __future__ import annotations

from ..types import TranscriptionOptions, TranscriptionResult
from .base import TranscriptionProvider


class MockTranscriptionProvider(TranscriptionProvider):
    name = "mock"

    def __init__(self, *, text: str = "mock transcription of the student's answer") -> None:
        self._text = text

    async def transcribe(self, *, audio: bytes, options: TranscriptionOptions) -> TranscriptionResult:
        text = self._text if audio else ""
        return TranscriptionResult(text=text, provider=self.name)
