from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field


class AnalysisResponse(BaseModel):
    transcript: str = ""
    feedback: str = ""


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = "speaking-practice-analyzer"
    timestamp: str


class PromptCatalogResponse(BaseModel):
    topics: Dict[str, List[str]] = Field(default_factory=dict)
