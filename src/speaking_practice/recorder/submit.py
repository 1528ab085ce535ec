from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..analyzer import AnalysisResult
from ..errors import SubmissionError
from .artifacts import AudioClip
from .metadata import SessionMetadata

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"
HTTP_TIMEOUT = httpx.Timeout(120.0, connect=5.0, read=120.0, write=30.0)


class AnalyzerClient:
    """Submits a recorded clip to the analyzer's ``POST /analyze`` endpoint."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: httpx.Timeout = HTTP_TIMEOUT,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client
        self._timeout = timeout

    def _build_url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def analyze(
        self,
        clip: AudioClip,
        metadata: Optional[SessionMetadata] = None,
        *,
        language: Optional[str] = None,
    ) -> AnalysisResult:
        files = {"audio": (clip.filename, clip.data, clip.mime_type)}
        data: Dict[str, str] = {}
        if metadata is not None and metadata.prompt:
            data["prompt"] = metadata.prompt
        if language:
            data["language"] = language

        try:
            if self._client is not None:
                resp = await self._client.post(self._build_url("/analyze"), files=files, data=data)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.post(self._build_url("/analyze"), files=files, data=data)
        except httpx.HTTPError as exc:
            logger.warning("recorder.submit.unreachable", extra={"error": repr(exc)})
            raise SubmissionError(f"Could not reach the analyzer: {exc}") from exc

        body = _json_or_empty(resp)
        if resp.is_error:
            message = str(body.get("error") or resp.text or resp.reason_phrase)
            logger.info("recorder.submit.rejected", extra={"status": resp.status_code, "error": message})
            raise SubmissionError(message, status_code=resp.status_code)

        return AnalysisResult(
            transcript=str(body.get("transcript") or ""),
            feedback=str(body.get("feedback") or ""),
        )


def _json_or_empty(resp: httpx.Response) -> Dict[str, Any]:
    try:
        body = resp.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
