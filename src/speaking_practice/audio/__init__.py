"""Audio upload ingestion and validation."""

from .ingest import AudioIngestor, IngestLimits, guess_content_type, normalize_content_type
from .types import AudioPayload

__all__ = [
    "AudioIngestor",
    "IngestLimits",
    "AudioPayload",
    "guess_content_type",
    "normalize_content_type",
]
