from __future__ import annotations

"""Runtime configuration helpers for the speaking-practice analyzer."""

import os
from dataclasses import dataclass

_BOOL_TRUTHY = {"1", "true", "yes", "on"}

DEFAULT_NO_SPEECH_FEEDBACK = (
    "No speech was detected in your recording. Check that your microphone is "
    "working, then record your answer again and speak clearly."
)
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _BOOL_TRUTHY


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = os.getenv(name)
    if value is None:
        return default
    items = tuple(item.strip() for item in value.split(",") if item.strip())
    return items or default


@dataclass(frozen=True)
class OpenAISettings:
    api_key: str | None
    organization: str | None
    base_url: str | None


@dataclass(frozen=True)
class TranscriptionSettings:
    provider: str
    model: str
    language: str | None
    timeout: float


@dataclass(frozen=True)
class FeedbackSettings:
    provider: str
    model: str
    temperature: float
    max_tokens: int
    word_budget: int
    timeout: float
    min_transcript_chars: int
    no_speech_message: str


@dataclass(frozen=True)
class UploadSettings:
    max_bytes: int


@dataclass(frozen=True)
class ServerSettings:
    host: str
    port: int
    cors_origins: tuple[str, ...]


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    format: str
    file: str | None


@dataclass(frozen=True)
class Settings:
    openai: OpenAISettings
    transcription: TranscriptionSettings
    feedback: FeedbackSettings
    upload: UploadSettings
    server: ServerSettings
    logging: LoggingSettings
    debug: bool = False


def load_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""

    openai_settings = OpenAISettings(
        api_key=os.getenv("OPENAI_API_KEY"),
        organization=os.getenv("OPENAI_ORG_ID"),
        base_url=os.getenv("OPENAI_BASE_URL"),
    )

    transcription_settings = TranscriptionSettings(
        provider=os.getenv("TRANSCRIPTION_PROVIDER", "openai"),
        model=os.getenv("TRANSCRIPTION_MODEL", "gpt-4o-transcribe"),
        language=os.getenv("TRANSCRIPTION_LANGUAGE", "en") or None,
        timeout=_env_float("TRANSCRIPTION_TIMEOUT", 60.0),
    )

    feedback_settings = FeedbackSettings(
        provider=os.getenv("FEEDBACK_PROVIDER", "openai"),
        model=os.getenv("FEEDBACK_MODEL", "gpt-4.1"),
        temperature=_env_float("FEEDBACK_TEMPERATURE", 0.3),
        max_tokens=_env_int("FEEDBACK_MAX_TOKENS", 600),
        word_budget=_env_int("FEEDBACK_WORD_BUDGET", 200),
        timeout=_env_float("FEEDBACK_TIMEOUT", 60.0),
        min_transcript_chars=_env_int("MIN_TRANSCRIPT_CHARS", 5),
        no_speech_message=os.getenv("NO_SPEECH_FEEDBACK", DEFAULT_NO_SPEECH_FEEDBACK),
    )

    upload_settings = UploadSettings(
        max_bytes=_env_int("UPLOAD_MAX_BYTES", 10 * 1024 * 1024),
    )

    server_settings = ServerSettings(
        host=os.getenv("HOST", "0.0.0.0"),
        port=_env_int("PORT", 3000),
        cors_origins=_env_list("CORS_ORIGINS", ("*",)),
    )

    logging_settings = LoggingSettings(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format=os.getenv("LOG_FORMAT", DEFAULT_LOG_FORMAT),
        file=os.getenv("LOG_FILE"),
    )

    return Settings(
        openai=openai_settings,
        transcription=transcription_settings,
        feedback=feedback_settings,
        upload=upload_settings,
        server=server_settings,
        logging=logging_settings,
        debug=_env_bool("DEBUG", False),
    )


settings = load_settings()

__all__ = [
    "Settings",
    "OpenAISettings",
    "TranscriptionSettings",
    "FeedbackSettings",
    "UploadSettings",
    "ServerSettings",
    "LoggingSettings",
    "DEFAULT_NO_SPEECH_FEEDBACK",
    "settings",
    "load_settings",
]
