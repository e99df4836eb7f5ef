"""Pydantic models passed between pipeline stages and the HTTP boundary."""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class DocumentKind(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    LEGACY_DOC = "doc"
    UNSUPPORTED = "unsupported"


class PipelineStage(str, Enum):
    START = "start"
    FETCHED = "fetched"
    REDUCED = "reduced"
    EXTRACTED = "extracted"
    VALIDATED = "validated"
    ANALYZED = "analyzed"
    DONE = "done"
    FAILED = "failed"


class RawPage(BaseModel):
    """Body of a fetched job posting page. Discarded after reduction."""
    url: str
    status_code: int
    content_type: Optional[str] = None
    text: str = ""


class CvDocument(BaseModel):
    """Uploaded résumé as received from the caller."""
    model_config = ConfigDict(frozen=True)

    content: bytes
    media_type: Optional[str] = None
    filename: Optional[str] = None


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class AnalysisRequest(BaseModel):
    """Chat-completions payload sent to the remote reasoning service."""
    model: str
    messages: list[ChatMessage]
    temperature: float = 0.7
    max_tokens: int = 1500


class AnalysisResponse(BaseModel):
    """Successful /analyze response."""
    analysis: str


class ErrorResponse(BaseModel):
    """Failed /analyze response. ``details`` is only set in development."""
    error: str
    details: Optional[str] = Field(default=None)
