"""Microphone capture workflow: prompts, record/stop state machine and submission."""

from .artifacts import AudioClip, ClipReference, ClipReferenceRegistry, download_filename
from .device import CaptureDevice, SoundDeviceCapture
from .machine import (
    Clipboard,
    Controls,
    CopyOutcome,
    InvalidTransitionError,
    Recorder,
    RecorderSession,
    RecorderState,
)
from .metadata import FormFields, SessionMetadata
from .prompts import NO_PROMPTS_TEXT, PROMPTS, PromptRotator
from .submit import AnalyzerClient
from .timer import ElapsedTicker, format_elapsed

__all__ = [
    "AnalyzerClient",
    "AudioClip",
    "CaptureDevice",
    "ClipReference",
    "ClipReferenceRegistry",
    "Clipboard",
    "Controls",
    "CopyOutcome",
    "ElapsedTicker",
    "FormFields",
    "InvalidTransitionError",
    "NO_PROMPTS_TEXT",
    "PROMPTS",
    "PromptRotator",
    "Recorder",
    "RecorderSession",
    "RecorderState",
    "SessionMetadata",
    "SoundDeviceCapture",
    "download_filename",
    "format_elapsed",
]
