"""Transcription provider implementations."""

from .base import TranscriptionProvider
from .mock import MockTranscriptionProvider
from .openai import OpenAITranscriptionProvider

__all__ = [
    "TranscriptionProvider",
    "MockTranscriptionProvider",
    "OpenAITranscriptionProvider",
]
