import pytest
from fastapi.testclient import TestClient

from speaking_practice import app as analyzer_app
from speaking_practice.analyzer import AnalyzerService
from speaking_practice.audio import AudioIngestor, IngestLimits
from speaking_practice.feedback.providers.mock import MockFeedbackProvider
from speaking_practice.feedback.rubric import DEFAULT_CATEGORIES
from speaking_practice.feedback.service import FeedbackService
from speaking_practice.settings import DEFAULT_NO_SPEECH_FEEDBACK
from speaking_practice.transcription.service import TranscriptionService


@pytest.fixture
def client():
    return TestClient(analyzer_app.app)


@pytest.fixture
def install_analyzer(monkeypatch):
    def _install(stt, feedback_provider):
        analyzer = AnalyzerService(
            transcription=TranscriptionService(provider=stt, default_lang="en", timeout=2.0),
            feedback=FeedbackService(provider=feedback_provider, timeout=2.0),
        )
        monkeypatch.setattr(analyzer_app, "analyzer", analyzer)
        return analyzer

    return _install


def _audio(data: bytes = b"\x1aE\xdf\xa3webm", content_type: str = "audio/webm"):
    return {"audio": ("recording.webm", data, content_type)}


def test_health_check(client):
    resp = client.get("/")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["timestamp"]


def test_prompt_catalog(client):
    resp = client.get("/prompts")

    assert resp.status_code == 200
    topics = resp.json()["topics"]
    assert set(topics) == {"animals", "environment", "transport", "customs", "health", "invention", "economics"}
    assert all(len(items) == 3 for items in topics.values())


def test_analyze_without_file_returns_400(client, install_analyzer, stub_stt, stub_feedback):
    stt = stub_stt("unused")
    install_analyzer(stt, stub_feedback())

    resp = client.post("/analyze", data={"prompt": "Describe a tradition."})

    assert resp.status_code == 400
    assert "No audio file" in resp.json()["error"]
    assert stt.calls == []


def test_analyze_with_text_file_returns_400(client, install_analyzer, stub_stt, stub_feedback):
    stt = stub_stt("unused")
    install_analyzer(stt, stub_feedback())

    resp = client.post("/analyze", files={"audio": ("notes.txt", b"hello", "text/plain")})

    assert resp.status_code == 400
    assert "text/plain" in resp.json()["error"]
    assert stt.calls == []


def test_analyze_oversized_upload_returns_400(monkeypatch, client, install_analyzer, stub_stt, stub_feedback):
    stt = stub_stt("unused")
    feedback = stub_feedback()
    install_analyzer(stt, feedback)
    monkeypatch.setattr(analyzer_app, "audio_ingestor", AudioIngestor(limits=IngestLimits(max_bytes=16)))

    resp = client.post("/analyze", files=_audio(b"x" * 17))

    assert resp.status_code == 400
    assert "too large" in resp.json()["error"]
    assert stt.calls == []
    assert feedback.calls == []


def test_analyze_silent_clip_returns_canned_feedback(client, install_analyzer, stub_stt, stub_feedback):
    feedback = stub_feedback()
    install_analyzer(stub_stt(""), feedback)

    resp = client.post("/analyze", files=_audio())

    assert resp.status_code == 200
    assert resp.json() == {"transcript": "", "feedback": DEFAULT_NO_SPEECH_FEEDBACK}
    assert feedback.calls == []


def test_analyze_success_contains_rubric_labels(client, install_analyzer, stub_stt):
    stt = stub_stt("Public transport is cheaper and better for the environment.")
    install_analyzer(stt, MockFeedbackProvider())

    resp = client.post(
        "/analyze",
        files=_audio(content_type="audio/webm;codecs=opus"),
        data={"prompt": "Compare public transport and private cars.", "language": "en"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["transcript"] == "Public transport is cheaper and better for the environment."
    for label in DEFAULT_CATEGORIES:
        assert f"{label}:" in body["feedback"]
    _, options = stt.calls[0]
    assert options.mime_type == "audio/webm"
    assert options.lang == "en"


def test_analyze_transcription_failure_returns_500(client, install_analyzer, stub_stt, stub_feedback):
    feedback = stub_feedback()
    install_analyzer(stub_stt(error=RuntimeError("provider exploded")), feedback)

    resp = client.post("/analyze", files=_audio())

    assert resp.status_code == 500
    assert "provider exploded" in resp.json()["error"]
    assert len(feedback.calls) == 0


def test_analyze_feedback_failure_returns_500(client, install_analyzer, stub_stt, stub_feedback):
    install_analyzer(stub_stt("This is a complete answer."), stub_feedback(error=RuntimeError("quota")))

    resp = client.post("/analyze", files=_audio())

    assert resp.status_code == 500
    assert set(resp.json()) == {"error"}
    assert "quota" in resp.json()["error"]


def test_analyze_passes_prompt_to_feedback(client, install_analyzer, stub_stt, stub_feedback):
    feedback = stub_feedback("Grammar: fine")
    install_analyzer(stub_stt("Tourists should dress modestly at temples."), feedback)

    resp = client.post(
        "/analyze",
        files=_audio(),
        data={"prompt": "How should tourists behave to respect local customs?"},
    )

    assert resp.status_code == 200
    assert feedback.calls[0]["prompt"] == "How should tourists behave to respect local customs?"


class _BrokenAnalyzer:
    async def analyze(self, payload, *, lang=None, prompt=None):
        raise KeyError("transcript")


def test_analyze_unexpected_error_returns_500_with_cors(monkeypatch, client):
    monkeypatch.setattr(analyzer_app, "analyzer", _BrokenAnalyzer())

    resp = client.post("/analyze", files=_audio(), headers={"Origin": "http://classroom.test"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Error analyzing audio."}
    assert resp.headers["access-control-allow-origin"] == "*"
