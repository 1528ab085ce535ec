from __future__ import annotations

from typing import Optional

from openai import AsyncOpenAI

from ...llm_client import OpenAIChatClient
from ...settings import FeedbackSettings, OpenAISettings
from ..rubric import RubricConfig, build_messages
from .base import FeedbackProvider


class OpenAIFeedbackProvider(FeedbackProvider):
    """Feedback provider backed by OpenAI chat completions."""

    name = "openai"

    def __init__(
        self,
        *,
        openai_cfg: Optional[OpenAISettings] = None,
        feedback_cfg: Optional[FeedbackSettings] = None,
        client: Optional[AsyncOpenAI] = None,
        chat_client: Optional[OpenAIChatClient] = None,
    ) -> None:
        self._chat = chat_client or OpenAIChatClient(openai_cfg, feedback_cfg, client=client)

    async def critique(self, *, transcript: str, rubric: RubricConfig, prompt: Optional[str] = None) -> str:
        messages = build_messages(transcript, rubric, prompt)
        return await self._chat.complete(messages, max_tokens=rubric.max_tokens)

    async def close(self) -> None:
        await self._chat.close()
