from __future__ import annotations

import re
from typing import Iterable, Optional

_KEY_PATTERN = re.compile(r"sk-[A-Za-z0-9_\-*]{4,}")
_REDACTED = "***"


def redact_secrets(message: str, secrets: Iterable[Optional[str]] = ()) -> str:
    """Strip API keys from a provider message before it leaves the process."""

    text = str(message)
    for secret in secrets:
        if secret:
            text = text.replace(secret, _REDACTED)
    return _KEY_PATTERN.sub(_REDACTED, text)


def timeout_message(operation: str, timeout: Optional[float]) -> str:
    if timeout:
        return f"{operation} timed out after {timeout:g} seconds."
    return f"{operation} timed out."


class CaptureError(RuntimeError):
    """Raised when the audio capture device cannot be acquired."""


class CaptureUnsupportedError(CaptureError):
    """Raised when the platform offers no audio capture API."""


class PermissionDeniedError(CaptureError):
    """Raised when microphone access was denied or blocked."""


class UploadRejectedError(ValueError):
    """Base class for uploads rejected before any provider is called."""


class MissingAudioError(UploadRejectedError):
    pass


class EmptyAudioError(UploadRejectedError):
    pass


class AudioTooLargeError(UploadRejectedError):
    pass


class UnsupportedAudioTypeError(UploadRejectedError):
    pass


class ProviderError(RuntimeError):
    """Raised when an external transcription or feedback provider fails."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(message)
        self.provider = provider
        self.message = message


class ProviderTimeoutError(ProviderError):
    """Raised when a provider call exceeds its configured timeout."""


class SubmissionError(RuntimeError):
    """Raised by the recorder client when the analyzer answers with an error."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


__all__ = [
    "redact_secrets",
    "timeout_message",
    "CaptureError",
    "CaptureUnsupportedError",
    "PermissionDeniedError",
    "UploadRejectedError",
    "MissingAudioError",
    "EmptyAudioError",
    "AudioTooLargeError",
    "UnsupportedAudioTypeError",
    "ProviderError",
    "ProviderTimeoutError",
    "SubmissionError",
]
