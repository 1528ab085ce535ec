from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from openai import AsyncOpenAI

from ...llm_client import LazyOpenAIClient
from ...settings import OpenAISettings
from ..types import TranscriptionOptions, TranscriptionResult
from .base import TranscriptionProvider

logger = logging.getLogger(__name__)


class OpenAITranscriptionProvider(TranscriptionProvider):
    """Transcription provider backed by the OpenAI audio transcriptions API."""

    name = "openai"

    def __init__(
        self,
        *,
        model: str = "gpt-4o-transcribe",
        openai_cfg: Optional[OpenAISettings] = None,
        client: Optional[AsyncOpenAI] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._model = model
        self._timeout = timeout
        self._client = LazyOpenAIClient(openai_cfg, client=client)

    async def transcribe(self, *, audio: bytes, options: TranscriptionOptions) -> TranscriptionResult:
        params: Dict[str, Any] = {
            "model": self._model,
            # (filename, content, content_type) lets the API detect the container
            "file": (options.filename, audio, options.mime_type),
        }
        if options.lang:
            params["language"] = options.lang
        if self._timeout is not None:
            params["timeout"] = self._timeout

        resp = await self._client.get().audio.transcriptions.create(**params)
        text = resp if isinstance(resp, str) else getattr(resp, "text", "")
        logger.info(
            "transcription.openai.complete",
            extra={"model": self._model, "bytes": len(audio), "chars": len(text or "")},
        )
        return TranscriptionResult(text=text or "", provider=self.name)

    async def close(self) -> None:
        await self._client.close()
