from __future__ import annotations

"""OpenAI client wrappers shared by the transcription and feedback providers."""

import logging
from collections.abc import Sequence
from typing import Any, Dict, Optional

from openai import AsyncOpenAI

from .settings import FeedbackSettings, OpenAISettings, settings

logger = logging.getLogger(__name__)

ChatMessage = Dict[str, Any]


class LLMNotConfiguredError(RuntimeError):
    """Raised when trying to use an OpenAI client without an API key."""


class LLMEmptyResponseError(RuntimeError):
    """Raised when a chat completion returns no text content."""


def build_openai_client(openai_cfg: Optional[OpenAISettings] = None) -> AsyncOpenAI:
    cfg = openai_cfg or settings.openai
    if not cfg.api_key:
        raise LLMNotConfiguredError("OPENAI_API_KEY is required to call OpenAI")
    return AsyncOpenAI(
        api_key=cfg.api_key,
        base_url=cfg.base_url,
        organization=cfg.organization,
    )


class LazyOpenAIClient:
    """Builds the AsyncOpenAI client on first use so a missing key fails per request."""

    def __init__(
        self,
        openai_cfg: Optional[OpenAISettings] = None,
        *,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self._openai_cfg = openai_cfg
        self._client = client
        self._owns_client = client is None

    def get(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = build_openai_client(self._openai_cfg)
        return self._client

    async def close(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None


class OpenAIChatClient:
    """Thin wrapper around AsyncOpenAI for single-attempt chat completions."""

    def __init__(
        self,
        openai_cfg: Optional[OpenAISettings] = None,
        feedback_cfg: Optional[FeedbackSettings] = None,
        *,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self._feedback_cfg = feedback_cfg or settings.feedback
        self._client = LazyOpenAIClient(openai_cfg, client=client)

    async def close(self) -> None:
        await self._client.close()

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        extra_options: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Issue one non-streaming chat completion and return its text."""

        cfg = self._feedback_cfg
        params: Dict[str, Any] = {
            "model": model or cfg.model,
            "messages": list(messages),
            "temperature": temperature if temperature is not None else cfg.temperature,
            "max_tokens": max_tokens if max_tokens is not None else cfg.max_tokens,
            "timeout": timeout if timeout is not None else cfg.timeout,
        }
        if extra_options:
            params.update(extra_options)

        resp = await self._client.get().chat.completions.create(**params)
        logger.info(
            "llm.chat.complete",
            extra={"model": params["model"], "max_tokens": params.get("max_tokens")},
        )
        for choice in getattr(resp, "choices", None) or []:
            message = getattr(choice, "message", None)
            if not message:
                continue
            content = getattr(message, "content", None)
            if isinstance(content, str) and content.strip():
                return content
        logger.warning("llm.chat.empty", extra={"model": params["model"]})
        raise LLMEmptyResponseError("feedback model returned no content")


__all__ = [
    "OpenAIChatClient",
    "LazyOpenAIClient",
    "LLMNotConfiguredError",
    "LLMEmptyResponseError",
    "ChatMessage",
    "build_openai_client",
]
