from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

from .audio import AudioPayload
from .feedback import FeedbackService
from .settings import DEFAULT_NO_SPEECH_FEEDBACK, Settings
from .transcription import TranscriptionService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AnalysisResult:
    transcript: str
    feedback: str
    speech_detected: bool = True


class AnalyzerService:
    """Runs the transcribe-then-critique pipeline for one uploaded clip.

    The pipeline is sequential and single-attempt: a provider failure is
    raised to the caller as ``ProviderError`` and nothing is retried or kept.
    Transcripts shorter than ``min_transcript_chars`` after trimming return
    ``no_speech_message`` without calling the feedback provider.
    """

    def __init__(
        self,
        *,
        transcription: TranscriptionService,
        feedback: FeedbackService,
        min_transcript_chars: int = 5,
        no_speech_message: str = DEFAULT_NO_SPEECH_FEEDBACK,
    ) -> None:
        self._transcription = transcription
        self._feedback = feedback
        self._min_transcript_chars = max(0, min_transcript_chars)
        self._no_speech_message = no_speech_message

    @classmethod
    def from_settings(cls, cfg: Settings) -> "AnalyzerService":
        return cls(
            transcription=TranscriptionService.from_settings(cfg.transcription, cfg.openai),
            feedback=FeedbackService.from_settings(cfg.feedback, cfg.openai),
            min_transcript_chars=cfg.feedback.min_transcript_chars,
            no_speech_message=cfg.feedback.no_speech_message,
        )

    @property
    def transcription(self) -> TranscriptionService:
        return self._transcription

    @property
    def feedback(self) -> FeedbackService:
        return self._feedback

    def is_meaningful(self, transcript: str) -> bool:
        return len(transcript.strip()) >= self._min_transcript_chars

    async def analyze(
        self,
        payload: AudioPayload,
        *,
        lang: Optional[str] = None,
        prompt: Optional[str] = None,
    ) -> AnalysisResult:
        started = time.perf_counter()
        result = await self._transcription.transcribe(payload, lang=lang)
        transcript = (result.text or "").strip()
        transcribed = time.perf_counter()
        logger.info(
            "analyze.transcribed",
            extra={
                "provider": result.provider,
                "bytes": payload.size,
                "chars": len(transcript),
                "latency_ms": round((transcribed - started) * 1000.0, 1),
            },
        )

        if not self.is_meaningful(transcript):
            logger.info("analyze.no_speech", extra={"chars": len(transcript)})
            return AnalysisResult(transcript=transcript, feedback=self._no_speech_message, speech_detected=False)

        feedback = await self._feedback.critique(transcript, prompt=prompt)
        logger.info(
            "analyze.complete",
            extra={
                "provider": self._feedback.provider.name,
                "latency_ms": round((time.perf_counter() - transcribed) * 1000.0, 1),
            },
        )
        return AnalysisResult(transcript=transcript, feedback=feedback.strip())

    async def close(self) -> None:
        await self._transcription.close()
        await self._feedback.close()
