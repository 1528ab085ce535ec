from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class TranscriptionOptions:
    lang: Optional[str] = None
    mime_type: str = "audio/webm"
    filename: str = "audio.webm"


@dataclass(slots=True)
class TranscriptionResult:
    text: str
    provider: Optional[str] = None
