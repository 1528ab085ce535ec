from __future__ import annotations

import abc
import asyncio
import io
import logging
import threading
from typing import Any, Callable, List, Optional

try:  # pragma: no cover - optional dependency guard
    import numpy as np
except Exception:  # pragma: no cover
    np = None  # type: ignore[assignment]

try:  # pragma: no cover - optional dependency guard
    import soundfile as sf
except Exception:  # pragma: no cover
    sf = None  # type: ignore[assignment]

try:  # pragma: no cover - sounddevice raises OSError when PortAudio is missing
    import sounddevice as sd
except Exception:  # pragma: no cover
    sd = None  # type: ignore[assignment]

from ..errors import CaptureError, CaptureUnsupportedError, PermissionDeniedError

logger = logging.getLogger(__name__)

DataCallback = Callable[[bytes], None]


class CaptureDevice(abc.ABC):
    """Interface for microphone capture backends used by the recorder."""

    name: str
    mime_type: str = "audio/webm"

    def is_supported(self) -> bool:
        return True

    @abc.abstractmethod
    async def acquire(self) -> None:
        """Obtain microphone access.

        Raises ``PermissionDeniedError`` when access is refused and
        ``CaptureError`` for any other acquisition failure.
        """

    @abc.abstractmethod
    async def start(self, on_data: DataCallback) -> None:
        """Begin capturing; encoded fragments are delivered to ``on_data``."""

    @abc.abstractmethod
    async def stop(self) -> None:
        """Stop capturing after delivering any remaining fragments."""

    async def release(self) -> None:
        """Give the microphone back to the system."""
        return None


class SoundDeviceCapture(CaptureDevice):
    """Capture from the default input device with sounddevice, encoded as WAV."""

    name = "sounddevice"
    mime_type = "audio/wav"

    def __init__(
        self,
        *,
        sample_rate: int = 16000,
        channels: int = 1,
        device: Optional[Any] = None,
        blocksize: int = 1024,
    ) -> None:
        self._sample_rate = sample_rate
        self._channels = channels
        self._device = device
        self._blocksize = blocksize
        self._stream: Any = None
        self._blocks: List[bytes] = []
        self._lock = threading.Lock()
        self._on_data: Optional[DataCallback] = None
        self._acquired = False

    def is_supported(self) -> bool:
        return sd is not None and sf is not None and np is not None

    async def acquire(self) -> None:
        if not self.is_supported():
            raise CaptureUnsupportedError("sounddevice, soundfile and numpy are required for audio capture")
        try:
            info = await asyncio.to_thread(sd.query_devices, self._device, "input")
        except ValueError as exc:
            raise CaptureError(f"no input device available: {exc}") from exc
        except sd.PortAudioError as exc:
            message = str(exc)
            if "permission" in message.lower() or "not authorized" in message.lower():
                raise PermissionDeniedError(message) from exc
            raise CaptureError(message) from exc
        logger.info("recorder.device.acquired", extra={"device": info.get("name") if isinstance(info, dict) else None})
        self._acquired = True

    async def start(self, on_data: DataCallback) -> None:
        if not self._acquired:
            await self.acquire()
        with self._lock:
            self._blocks = []
        self._on_data = on_data
        try:
            self._stream = sd.RawInputStream(
                samplerate=self._sample_rate,
                channels=self._channels,
                dtype="int16",
                device=self._device,
                blocksize=self._blocksize,
                callback=self._callback,
            )
            self._stream.start()
        except sd.PortAudioError as exc:
            self._stream = None
            raise CaptureError(str(exc)) from exc

    async def stop(self) -> None:
        stream, self._stream = self._stream, None
        on_data, self._on_data = self._on_data, None
        try:
            if stream is not None:
                await asyncio.to_thread(stream.stop)
                await asyncio.to_thread(stream.close)
        except sd.PortAudioError as exc:
            with self._lock:
                self._blocks = []
            raise CaptureError(str(exc)) from exc
        with self._lock:
            pcm = b"".join(self._blocks)
            self._blocks = []
        if on_data is None or not pcm:
            return
        try:
            encoded = self._encode_wav(pcm)
        except (RuntimeError, ValueError) as exc:
            # soundfile raises LibsndfileError (a RuntimeError); numpy reshape raises ValueError
            raise CaptureError(f"could not encode recording: {exc}") from exc
        on_data(encoded)

    async def release(self) -> None:
        if self._stream is not None:
            await self.stop()
        self._acquired = False

    def _callback(self, indata: Any, frames: int, time_info: Any, status: Any) -> None:
        if status:
            logger.debug("recorder.device.status", extra={"status": str(status)})
        with self._lock:
            self._blocks.append(bytes(indata))

    def _encode_wav(self, pcm: bytes) -> bytes:
        samples = np.frombuffer(pcm, dtype=np.int16).reshape(-1, self._channels)
        buffer = io.BytesIO()
        sf.write(buffer, samples, self._sample_rate, format="WAV", subtype="PCM_16")
        return buffer.getvalue()
