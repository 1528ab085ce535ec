from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..errors import ProviderError, ProviderTimeoutError, redact_secrets, timeout_message
from ..settings import FeedbackSettings, OpenAISettings
from .providers.base import FeedbackProvider
from .providers.mock import MockFeedbackProvider
from .providers.openai import OpenAIFeedbackProvider
from .rubric import RubricConfig

logger = logging.getLogger(__name__)


class FeedbackService:
    """Coordinates feedback provider usage with a bounded timeout."""

    def __init__(
        self,
        *,
        provider: Optional[FeedbackProvider] = None,
        rubric: Optional[RubricConfig] = None,
        timeout: Optional[float] = None,
        secrets: tuple[Optional[str], ...] = (),
    ) -> None:
        self._provider = provider or MockFeedbackProvider()
        self._rubric = rubric or RubricConfig()
        self._timeout = timeout
        self._secrets = secrets

    @classmethod
    def from_settings(
        cls,
        cfg: FeedbackSettings,
        openai_cfg: Optional[OpenAISettings] = None,
    ) -> "FeedbackService":
        provider_name = (cfg.provider or "openai").strip().lower()
        if provider_name in {"mock", "fake"}:
            provider: FeedbackProvider = MockFeedbackProvider()
        elif provider_name == "openai":
            provider = OpenAIFeedbackProvider(openai_cfg=openai_cfg, feedback_cfg=cfg)
        else:
            raise RuntimeError(f"unsupported feedback provider: {cfg.provider}")
        secrets = (openai_cfg.api_key,) if openai_cfg is not None else ()
        return cls(
            provider=provider,
            rubric=RubricConfig.from_settings(cfg),
            timeout=cfg.timeout,
            secrets=secrets,
        )

    async def critique(self, transcript: str, *, prompt: Optional[str] = None) -> str:
        try:
            return await asyncio.wait_for(
                self._provider.critique(transcript=transcript, rubric=self._rubric, prompt=prompt),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            logger.warning("feedback.timeout", extra={"provider": self._provider.name, "timeout": self._timeout})
            raise ProviderTimeoutError(self._provider.name, timeout_message("Feedback generation", self._timeout)) from exc
        except ProviderError:
            raise
        except Exception as exc:
            message = redact_secrets(str(exc) or exc.__class__.__name__, self._secrets)
            logger.warning("feedback.failed", extra={"provider": self._provider.name, "error": message})
            raise ProviderError(self._provider.name, f"Feedback generation failed: {message}") from exc

    async def close(self) -> None:
        await self._provider.close()

    @property
    def provider(self) -> FeedbackProvider:
        return self._provider

    @property
    def rubric(self) -> RubricConfig:
        return self._rubric
