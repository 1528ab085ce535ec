from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping


@dataclass(slots=True)
class AudioPayload:
    """Validated audio upload owned by a single request."""

    data: bytes
    content_type: str
    filename: str = "audio.webm"
    extra: Mapping[str, str] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return len(self.data)

