import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .analyzer import AnalyzerService
from .audio import AudioIngestor, IngestLimits
from .errors import ProviderError, UploadRejectedError
from .recorder.prompts import PROMPTS
from .schemas import AnalysisResponse, ErrorResponse, HealthResponse, PromptCatalogResponse
from .settings import settings as runtime_settings

logger = logging.getLogger(__name__)

audio_ingestor = AudioIngestor(limits=IngestLimits(max_bytes=runtime_settings.upload.max_bytes))
analyzer = AnalyzerService.from_settings(runtime_settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "analyzer.startup",
        extra={
            "transcription_provider": analyzer.transcription.provider.name,
            "feedback_provider": analyzer.feedback.provider.name,
            "max_bytes": audio_ingestor.limits.max_bytes,
        },
    )
    yield
    await analyzer.close()
    logger.info("analyzer.shutdown")


app = FastAPI(title="Speaking Practice Analyzer", lifespan=lifespan)

_origins = list(runtime_settings.server.cors_origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials="*" not in _origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(UploadRejectedError)
async def _upload_rejected(request: Request, exc: UploadRejectedError) -> JSONResponse:
    return _error(400, str(exc))


@app.exception_handler(RequestValidationError)
async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("analyze.invalid_request", extra={"errors": exc.errors()})
    return _error(400, "Invalid upload. Send a multipart form with an 'audio' file field.")


@app.exception_handler(ProviderError)
async def _provider_failed(request: Request, exc: ProviderError) -> JSONResponse:
    logger.error("analyze.provider_failed", extra={"provider": exc.provider, "error": exc.message})
    return _error(500, exc.message)


@app.get("/", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(timestamp=datetime.now(timezone.utc).isoformat())


@app.get("/prompts", response_model=PromptCatalogResponse)
async def prompts() -> PromptCatalogResponse:
    return PromptCatalogResponse(topics={topic: list(items) for topic, items in PROMPTS.items()})


@app.post(
    "/analyze",
    response_model=AnalysisResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze(
    audio: Optional[UploadFile] = File(None),
    prompt: Optional[str] = Form(None),
    language: Optional[str] = Form(None),
) -> AnalysisResponse:
    try:
        payload = await audio_ingestor.from_upload(
            file_reader=audio.read if audio is not None else None,
            content_type=audio.content_type if audio is not None else None,
            filename=audio.filename if audio is not None else None,
        )
    finally:
        if audio is not None:
            await audio.close()

    lang = language.strip() if language and language.strip() else None
    try:
        result = await analyzer.analyze(payload, lang=lang, prompt=prompt)
    except ProviderError:
        raise
    except Exception:
        logger.exception("analyze.unexpected_error")
        return _error(500, "Error analyzing audio.")
    return AnalysisResponse(transcript=result.transcript, feedback=result.feedback)

