from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from ..errors import AudioTooLargeError, EmptyAudioError, MissingAudioError, UnsupportedAudioTypeError
from .types import AudioPayload

logger = logging.getLogger(__name__)

_GENERIC_TYPES = {"", "application/octet-stream", "binary/octet-stream"}
_EXTENSION_TYPES = {
    ".webm": "audio/webm",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".m4a": "audio/mp4",
    ".mp4": "audio/mp4",
    ".ogg": "audio/ogg",
    ".oga": "audio/ogg",
    ".flac": "audio/flac",
}


def normalize_content_type(value: Optional[str]) -> str:
    """Lowercase a MIME type and drop parameters such as ``;codecs=opus``."""
    if not value:
        return ""
    return value.split(";", 1)[0].strip().lower()


def guess_content_type(provided: Optional[str], filename: Optional[str]) -> str:
    content_type = normalize_content_type(provided)
    if content_type not in _GENERIC_TYPES:
        return content_type
    if not filename:
        return content_type
    suffix = os.path.splitext(filename)[1].lower()
    return _EXTENSION_TYPES.get(suffix, content_type)


@dataclass(slots=True)
class IngestLimits:
    max_bytes: int


class AudioIngestor:
    """Validates inbound uploads and turns them into AudioPayload objects."""

    def __init__(self, *, limits: IngestLimits) -> None:
        self._limits = limits

    @property
    def limits(self) -> IngestLimits:
        return self._limits

    async def from_bytes(
        self,
        *,
        data: bytes,
        content_type: Optional[str],
        filename: Optional[str] = None,
        meta: Optional[dict[str, Any]] = None,
    ) -> AudioPayload:
        resolved_type = guess_content_type(content_type, filename)
        if not resolved_type.startswith("audio/"):
            logger.info("ingest.rejected", extra={"reason": "type", "content_type": resolved_type or None})
            raise UnsupportedAudioTypeError(
                f"Unsupported file type '{resolved_type or 'unknown'}'. Please upload an audio file."
            )
        self._enforce_size(len(data))
        if not data:
            logger.info("ingest.rejected", extra={"reason": "empty"})
            raise EmptyAudioError("The uploaded audio file is empty.")
        return AudioPayload(
            data=data,
            content_type=resolved_type,
            filename=filename or _default_filename(resolved_type),
            extra=meta or {},
        )

    async def from_upload(
        self,
        *,
        file_reader: Optional[Callable[[int], Awaitable[bytes]]],
        content_type: Optional[str],
        filename: Optional[str] = None,
        meta: Optional[dict[str, Any]] = None,
    ) -> AudioPayload:
        """Read at most ``max_bytes + 1`` bytes so oversized uploads are never buffered whole."""
        if file_reader is None:
            logger.info("ingest.rejected", extra={"reason": "missing"})
            raise MissingAudioError("No audio file uploaded. Attach the recording in the 'audio' field.")
        data = await file_reader(self._limits.max_bytes + 1)
        return await self.from_bytes(data=data, content_type=content_type, filename=filename, meta=meta)

    def _enforce_size(self, size: int) -> None:
        if size > self._limits.max_bytes:
            logger.info("ingest.rejected", extra={"reason": "size", "size": size})
            limit_mb = self._limits.max_bytes / (1024 * 1024)
            raise AudioTooLargeError(f"Audio file too large. The limit is {limit_mb:g} MB.")


def _default_filename(content_type: str) -> str:
    for suffix, mapped in _EXTENSION_TYPES.items():
        if mapped == content_type:
            return f"audio{suffix}"
    return "audio.webm"
