"""
pytest configuration: shared fakes for providers, capture devices and clocks.
"""

import asyncio
from typing import Callable, List, Optional

import pytest

from speaking_practice.feedback.providers.base import FeedbackProvider
from speaking_practice.feedback.rubric import RubricConfig
from speaking_practice.recorder.device import CaptureDevice
from speaking_practice.settings import (
    DEFAULT_NO_SPEECH_FEEDBACK,
    FeedbackSettings,
    LoggingSettings,
    OpenAISettings,
    ServerSettings,
    Settings,
    TranscriptionSettings,
    UploadSettings,
)
from speaking_practice.transcription.providers.base import TranscriptionProvider
from speaking_practice.transcription.types import TranscriptionOptions, TranscriptionResult


class StubTranscriptionProvider(TranscriptionProvider):
    name = "stub-stt"

    def __init__(self, text: str = "", *, error: Optional[Exception] = None, delay: float = 0.0) -> None:
        self.text = text
        self.error = error
        self.delay = delay
        self.calls: List[tuple[bytes, TranscriptionOptions]] = []

    async def transcribe(self, *, audio: bytes, options: TranscriptionOptions) -> TranscriptionResult:
        self.calls.append((audio, options))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return TranscriptionResult(text=self.text, provider=self.name)


class StubFeedbackProvider(FeedbackProvider):
    name = "stub-feedback"

    def __init__(self, reply: str = "Grammar: good.", *, error: Optional[Exception] = None, delay: float = 0.0) -> None:
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls: List[dict] = []

    async def critique(self, *, transcript: str, rubric: RubricConfig, prompt: Optional[str] = None) -> str:
        self.calls.append({"transcript": transcript, "rubric": rubric, "prompt": prompt})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply


class FakeCaptureDevice(CaptureDevice):
    """In-memory capture device; ``pending`` fragments are flushed on stop."""

    name = "fake"
    mime_type = "audio/webm"

    def __init__(
        self,
        *,
        supported: bool = True,
        acquire_error: Optional[Exception] = None,
        start_error: Optional[Exception] = None,
        stop_error: Optional[Exception] = None,
    ) -> None:
        self.supported = supported
        self.acquire_error = acquire_error
        self.start_error = start_error
        self.stop_error = stop_error
        self.pending: List[bytes] = []
        self.on_data: Optional[Callable[[bytes], None]] = None
        self.started = 0
        self.stopped = 0
        self.released = False

    def is_supported(self) -> bool:
        return self.supported

    async def acquire(self) -> None:
        if self.acquire_error is not None:
            raise self.acquire_error

    async def start(self, on_data: Callable[[bytes], None]) -> None:
        if self.start_error is not None:
            raise self.start_error
        self.started += 1
        self.on_data = on_data

    def emit(self, fragment: bytes) -> None:
        assert self.on_data is not None
        self.on_data(fragment)

    async def stop(self) -> None:
        self.stopped += 1
        if self.stop_error is not None:
            raise self.stop_error
        for fragment in self.pending:
            if self.on_data is not None:
                self.on_data(fragment)
        self.pending = []
        self.on_data = None

    async def release(self) -> None:
        self.released = True


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingClipboard:
    async def write_text(self, text: str) -> None:
        raise PermissionError("clipboard blocked")


class MemoryClipboard:
    def __init__(self) -> None:
        self.text: Optional[str] = None

    async def write_text(self, text: str) -> None:
        self.text = text


def make_settings(
    *,
    transcription_provider: str = "mock",
    feedback_provider: str = "mock",
    api_key: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,
    min_transcript_chars: int = 5,
) -> Settings:
    return Settings(
        openai=OpenAISettings(api_key=api_key, organization=None, base_url=None),
        transcription=TranscriptionSettings(
            provider=transcription_provider,
            model="gpt-4o-transcribe",
            language="en",
            timeout=5.0,
        ),
        feedback=FeedbackSettings(
            provider=feedback_provider,
            model="gpt-4.1",
            temperature=0.0,
            max_tokens=300,
            word_budget=150,
            timeout=5.0,
            min_transcript_chars=min_transcript_chars,
            no_speech_message=DEFAULT_NO_SPEECH_FEEDBACK,
        ),
        upload=UploadSettings(max_bytes=max_bytes),
        server=ServerSettings(host="127.0.0.1", port=3000, cors_origins=("*",)),
        logging=LoggingSettings(level="INFO", format="%(message)s", file=None),
    )


@pytest.fixture
def settings_factory():
    return make_settings


@pytest.fixture
def stub_stt():
    return StubTranscriptionProvider


@pytest.fixture
def stub_feedback():
    return StubFeedbackProvider


@pytest.fixture
def fake_device():
    return FakeCaptureDevice()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def memory_clipboard():
    return MemoryClipboard()


@pytest.fixture
def failing_clipboard():
    return FailingClipboard()


@pytest.fixture
def device_factory():
    return FakeCaptureDevice
