"""Speech-to-text adapters for the analyzer."""

from .service import TranscriptionService
from .types import TranscriptionOptions, TranscriptionResult

__all__ = ["TranscriptionService", "TranscriptionOptions", "TranscriptionResult"]
