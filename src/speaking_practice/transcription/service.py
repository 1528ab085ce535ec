from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..audio import AudioPayload
from ..errors import ProviderError, ProviderTimeoutError, redact_secrets, timeout_message
from ..settings import OpenAISettings, TranscriptionSettings
from .providers.base import TranscriptionProvider
from .providers.mock import MockTranscriptionProvider
from .providers.openai import OpenAITranscriptionProvider
from .types import TranscriptionOptions, TranscriptionResult

logger = logging.getLogger(__name__)


class TranscriptionService:
    """Coordinates transcription provider usage with a bounded timeout."""

    def __init__(
        self,
        *,
        provider: Optional[TranscriptionProvider] = None,
        default_lang: Optional[str] = None,
        timeout: Optional[float] = None,
        secrets: tuple[Optional[str], ...] = (),
    ) -> None:
        self._provider = provider or MockTranscriptionProvider()
        self._default_lang = default_lang
        self._timeout = timeout
        self._secrets = secrets

    @classmethod
    def from_settings(
        cls,
        cfg: TranscriptionSettings,
        openai_cfg: Optional[OpenAISettings] = None,
    ) -> "TranscriptionService":
        provider_name = (cfg.provider or "openai").strip().lower()
        if provider_name in {"mock", "fake"}:
            provider: TranscriptionProvider = MockTranscriptionProvider()
        elif provider_name == "openai":
            provider = OpenAITranscriptionProvider(model=cfg.model, openai_cfg=openai_cfg, timeout=cfg.timeout)
        else:
            raise RuntimeError(f"unsupported transcription provider: {cfg.provider}")
        secrets = (openai_cfg.api_key,) if openai_cfg is not None else ()
        return cls(provider=provider, default_lang=cfg.language, timeout=cfg.timeout, secrets=secrets)

    async def transcribe(self, payload: AudioPayload, *, lang: Optional[str] = None) -> TranscriptionResult:
        options = TranscriptionOptions(
            lang=lang or self._default_lang,
            mime_type=payload.content_type,
            filename=payload.filename,
        )
        try:
            return await asyncio.wait_for(
                self._provider.transcribe(audio=payload.data, options=options),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            logger.warning(
                "transcription.timeout",
                extra={"provider": self._provider.name, "timeout": self._timeout},
            )
            raise ProviderTimeoutError(self._provider.name, timeout_message("Transcription", self._timeout)) from exc
        except ProviderError:
            raise
        except Exception as exc:
            message = redact_secrets(str(exc) or exc.__class__.__name__, self._secrets)
            logger.warning(
                "transcription.failed",
                extra={"provider": self._provider.name, "error": message},
            )
            raise ProviderError(self._provider.name, f"Transcription failed: {message}") from exc

    async def close(self) -> None:
        await self._provider.close()

    @property
    def provider(self) -> TranscriptionProvider:
        return self._provider
