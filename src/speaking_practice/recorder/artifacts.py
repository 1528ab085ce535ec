from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/mpeg": "mp3",
    "audio/mp4": "m4a",
}


def download_filename(mime_type: str, stem: str = "recording") -> str:
    base = mime_type.split(";", 1)[0].strip().lower()
    return f"{stem}.{_EXTENSIONS.get(base, 'webm')}"


@dataclass(frozen=True, slots=True)
class AudioClip:
    """One finalized recording assembled from captured fragments."""

    data: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def filename(self) -> str:
        return download_filename(self.mime_type)


@dataclass(frozen=True, slots=True)
class ClipReference:
    url: str
    filename: Optional[str] = None


class ClipReferenceRegistry:
    """Hands out playable/downloadable references to clips and revokes them."""

    def __init__(self) -> None:
        self._live: Dict[str, AudioClip] = {}

    def create(self, clip: AudioClip, *, filename: Optional[str] = None) -> ClipReference:
        url = f"blob:{uuid.uuid4()}"
        self._live[url] = clip
        return ClipReference(url=url, filename=filename)

    def resolve(self, reference: ClipReference) -> Optional[AudioClip]:
        return self._live.get(reference.url)

    def revoke(self, reference: Optional[ClipReference]) -> None:
        if reference is None:
            return
        if self._live.pop(reference.url, None) is not None:
            logger.debug("recorder.reference.revoked", extra={"url": reference.url})

    def __len__(self) -> int:
        return len(self._live)
