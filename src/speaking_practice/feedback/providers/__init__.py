"""Feedback provider implementations."""

from .base import FeedbackProvider
from .mock import MockFeedbackProvider
from .openai import OpenAIFeedbackProvider

__all__ = ["FeedbackProvider", "MockFeedbackProvider", "OpenAIFeedbackProvider"]
