from __future__ import annotations

"""Record/stop state machine for one student's practice session."""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Protocol

from ..analyzer import AnalysisResult
from ..errors import CaptureError, CaptureUnsupportedError, PermissionDeniedError, SubmissionError
from .artifacts import AudioClip, ClipReference, ClipReferenceRegistry
from .device import CaptureDevice
from .metadata import FormFields, SessionMetadata
from .prompts import PromptRotator
from .submit import AnalyzerClient
from .timer import TICK_INTERVAL_SECONDS, ElapsedTicker, format_elapsed

logger = logging.getLogger(__name__)

STATUS_UNSUPPORTED = "This device cannot record audio here."
STATUS_READY = "Mic ready. Tap Start Recording."
STATUS_RECORDING = "Recording…"
STATUS_RECORDED = "Recorded. Play or download below."
STATUS_PERMISSION_DENIED = "Microphone access is blocked. Allow microphone access in your settings, then reload."
STATUS_ANALYZING = "Analyzing your answer…"
STATUS_ANALYZED = "Feedback ready."
COPY_DONE_TEXT = "Copied ✔"
COPY_FAILED_TEXT = "Copy failed. Select the text and copy manually."
COPY_EMPTY_TEXT = "Nothing to copy yet. Record an answer first."


class RecorderState(str, Enum):
    IDLE = "idle"
    READY = "ready"
    RECORDING = "recording"
    STOPPED = "stopped"
    UNAVAILABLE = "unavailable"


class InvalidTransitionError(RuntimeError):
    """Raised when an action is not allowed in the recorder's current state."""


class Clipboard(Protocol):
    async def write_text(self, text: str) -> None:
        ...


@dataclass(slots=True)
class Controls:
    record_enabled: bool = False
    stop_enabled: bool = False
    copy_enabled: bool = False
    submit_enabled: bool = False
    download_visible: bool = False


@dataclass(slots=True)
class CopyOutcome:
    copied: bool
    message: str


@dataclass
class RecorderSession:
    """All mutable state of one capture session, held in one place."""

    device: CaptureDevice
    form: FormFields = field(default_factory=FormFields)
    state: RecorderState = RecorderState.IDLE
    status: str = ""
    timer_text: str = format_elapsed(0)
    help_visible: bool = False
    controls: Controls = field(default_factory=Controls)
    fragments: List[bytes] = field(default_factory=list)
    clip: Optional[AudioClip] = None
    metadata: Optional[SessionMetadata] = None
    playback: Optional[ClipReference] = None
    download: Optional[ClipReference] = None
    ticker: Optional[ElapsedTicker] = None
    last_result: Optional[AnalysisResult] = None
    last_error: Optional[str] = None

    @property
    def metadata_text(self) -> str:
        return self.metadata.to_json(indent=2) if self.metadata is not None else ""


class Recorder:
    """Drives a RecorderSession through Idle, Ready, Recording, Stopped and Unavailable.

    Device failures never escape a transition: they are turned into status
    text and the ``UNAVAILABLE`` state. Calling an action the current state
    does not allow raises ``InvalidTransitionError``.
    """

    def __init__(
        self,
        session: RecorderSession,
        *,
        prompts: Optional[PromptRotator] = None,
        references: Optional[ClipReferenceRegistry] = None,
        clock: Callable[[], float] = time.monotonic,
        tick_interval: float = TICK_INTERVAL_SECONDS,
        now: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.session = session
        self.prompts = prompts or PromptRotator()
        self.references = references or ClipReferenceRegistry()
        self._clock = clock
        self._tick_interval = tick_interval
        self._now = now

    @property
    def state(self) -> RecorderState:
        return self.session.state

    async def setup(self) -> RecorderState:
        """Acquire the microphone: Idle -> Ready, or Idle -> Unavailable."""
        session = self.session
        self._require(RecorderState.IDLE, action="setup")

        if not session.device.is_supported():
            self._become_unavailable(STATUS_UNSUPPORTED, show_help=True)
            return session.state

        try:
            await session.device.acquire()
        except CaptureUnsupportedError:
            self._become_unavailable(STATUS_UNSUPPORTED, show_help=True)
            return session.state
        except PermissionDeniedError as exc:
            self._become_unavailable(f"Mic error: {exc}", show_help=True)
            return session.state
        except CaptureError as exc:
            self._become_unavailable(f"Mic error: {exc}")
            return session.state

        session.status = STATUS_READY
        session.controls = Controls(record_enabled=True)
        self._transition(RecorderState.READY)
        return session.state

    async def start(self) -> RecorderState:
        """Begin a capture, discarding any previous clip and metadata."""
        session = self.session
        self._require(RecorderState.READY, RecorderState.STOPPED, action="start")

        self._discard_clip()
        session.fragments = []
        session.last_result = None
        session.last_error = None
        try:
            await session.device.start(self.on_data)
        except CaptureError as exc:
            self._become_unavailable(f"Mic error: {exc}", show_help=isinstance(exc, PermissionDeniedError))
            return session.state
        except Exception as exc:
            logger.exception("recorder.device.start_failed")
            self._become_unavailable(f"Mic error: {exc}")
            return session.state

        session.ticker = ElapsedTicker(self._on_tick, interval=self._tick_interval, clock=self._clock)
        session.ticker.start()
        session.status = STATUS_RECORDING
        session.controls = Controls(stop_enabled=True)
        self._transition(RecorderState.RECORDING)
        return session.state

    def on_data(self, fragment: bytes) -> None:
        if self.session.state is not RecorderState.RECORDING:
            logger.debug("recorder.data.ignored", extra={"state": self.session.state.value})
            return
        if fragment:
            self.session.fragments.append(fragment)

    async def stop(self) -> Optional[SessionMetadata]:
        """Finish the capture: Recording -> Stopped with a new clip and metadata."""
        session = self.session
        self._require(RecorderState.RECORDING, action="stop")

        duration_sec = self._stop_ticker()
        try:
            await session.device.stop()
        except Exception as exc:
            if not isinstance(exc, CaptureError):
                logger.exception("recorder.device.stop_failed")
            session.fragments = []
            if session.state is RecorderState.RECORDING:
                self._become_unavailable(f"Mic error: {exc}")
            return None

        if session.state is not RecorderState.RECORDING:
            # the session left Recording (e.g. permission revoked) while the device flushed
            logger.info("recorder.stop.superseded", extra={"state": session.state.value})
            session.fragments = []
            return None

        clip = AudioClip(data=b"".join(session.fragments), mime_type=session.device.mime_type)
        session.fragments = []
        self._discard_clip()
        session.clip = clip
        session.playback = self.references.create(clip)
        session.download = self.references.create(clip, filename=clip.filename)
        session.metadata = SessionMetadata.capture(
            session.form,
            unit=self.prompts.topic,
            prompt=self.prompts.current,
            duration_sec=duration_sec,
            moment=self._now() if self._now is not None else None,
        )
        session.timer_text = format_elapsed(duration_sec)
        session.status = STATUS_RECORDED
        session.controls = Controls(
            record_enabled=True,
            copy_enabled=True,
            submit_enabled=True,
            download_visible=True,
        )
        self._transition(RecorderState.STOPPED)
        return session.metadata

    async def on_permission_change(self, permission: str) -> RecorderState:
        """React to the microphone permission changing outside the recorder."""
        session = self.session
        if permission != "denied":
            session.help_visible = False
            return session.state
        if session.state is RecorderState.UNAVAILABLE:
            session.help_visible = True
            return session.state
        was_recording = session.state is RecorderState.RECORDING
        self._become_unavailable(STATUS_PERMISSION_DENIED, show_help=True)
        if was_recording:
            await self._halt_device()
        return session.state

    async def copy_metadata(self, clipboard: Clipboard) -> CopyOutcome:
        metadata = self.session.metadata
        if metadata is None:
            return CopyOutcome(copied=False, message=COPY_EMPTY_TEXT)
        try:
            await clipboard.write_text(metadata.to_json())
        except Exception as exc:
            logger.info("recorder.copy.failed", extra={"error": repr(exc)})
            return CopyOutcome(copied=False, message=COPY_FAILED_TEXT)
        return CopyOutcome(copied=True, message=COPY_DONE_TEXT)

    async def submit(self, client: AnalyzerClient, *, language: Optional[str] = None) -> Optional[AnalysisResult]:
        """Send the current clip to the analyzer; failures become status text.

        A result that arrives after a new recording replaced the clip is not
        applied to the session.
        """
        session = self.session
        if session.clip is None or session.metadata is None:
            raise InvalidTransitionError("submit requires a finished recording")

        clip = session.clip
        session.controls.submit_enabled = False
        session.status = STATUS_ANALYZING
        try:
            result = await client.analyze(clip, session.metadata, language=language)
        except SubmissionError as exc:
            if session.clip is not clip:
                logger.info("recorder.submit.stale", extra={"error": str(exc)})
                return None
            session.last_error = str(exc)
            session.status = f"Analysis failed: {exc}"
            session.controls.submit_enabled = True
            return None
        if session.clip is not clip:
            # a new recording replaced the clip while it was being analyzed
            logger.info("recorder.submit.stale")
            return None
        session.last_result = result
        session.status = STATUS_ANALYZED
        session.controls.submit_enabled = True
        return result

    async def close(self) -> None:
        session = self.session
        self._stop_ticker()
        if session.state is RecorderState.RECORDING:
            await self._halt_device()
        self._discard_clip()
        await session.device.release()

    async def _halt_device(self) -> None:
        try:
            await self.session.device.stop()
        except Exception:
            logger.debug("recorder.device.halt_failed", exc_info=True)
        self.session.fragments = []

    def _on_tick(self, text: str) -> None:
        self.session.timer_text = text

    def _stop_ticker(self) -> int:
        ticker, self.session.ticker = self.session.ticker, None
        if ticker is None:
            return 0
        return ticker.stop()

    def _discard_clip(self) -> None:
        session = self.session
        self.references.revoke(session.playback)
        self.references.revoke(session.download)
        session.playback = None
        session.download = None
        session.clip = None
        session.metadata = None

    def _become_unavailable(self, status: str, *, show_help: bool = False) -> None:
        session = self.session
        self._stop_ticker()
        session.status = status
        session.help_visible = session.help_visible or show_help
        has_clip = session.clip is not None
        session.controls = Controls(
            copy_enabled=has_clip,
            submit_enabled=has_clip,
            download_visible=has_clip,
        )
        self._transition(RecorderState.UNAVAILABLE)

    def _transition(self, target: RecorderState) -> None:
        previous = self.session.state
        self.session.state = target
        logger.info("recorder.state", extra={"from": previous.value, "to": target.value})

    def _require(self, *allowed: RecorderState, action: str) -> None:
        if self.session.state not in allowed:
            raise InvalidTransitionError(f"cannot {action} while {self.session.state.value}")
