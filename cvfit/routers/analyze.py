"""Fit analysis endpoint.

The router handles:
  - multipart parsing of the two inputs (jobUrl, cv)
  - upload size validation and release of the spooled upload
  - mapping PipelineError kinds onto HTTP status codes

Everything else (fetching, extraction, the LLM call) lives in the
pipeline service.
"""

from __future__ import annotations

import logging
import traceback
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from cvfit.core.config import settings
from cvfit.core.errors import ErrorKind, PipelineError
from cvfit.services.pipeline import AnalysisPipeline
from cvfit.shared.models import AnalysisResponse, CvDocument, ErrorResponse

logger = logging.getLogger(__name__)
router = APIRouter()

MAX_SIZE = settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.MISSING_INPUT: 400,
    ErrorKind.CONTENT_TOO_SHORT: 400,
    ErrorKind.UNSUPPORTED_FORMAT: 400,
    ErrorKind.LEGACY_FORMAT_UNSUPPORTED: 400,
    ErrorKind.DECODE_FAILURE: 400,
    ErrorKind.CV_TOO_SHORT: 400,
    ErrorKind.JOB_DESCRIPTION_TOO_SHORT: 400,
    ErrorKind.FETCH_FAILURE: 502,
    ErrorKind.MISSING_CREDENTIAL: 500,
    ErrorKind.INVALID_CREDENTIAL: 502,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.REMOTE_SERVICE_ERROR: 502,
}


def get_pipeline() -> AnalysisPipeline:
    return AnalysisPipeline.from_settings(settings)


def error_response(status_code: int, message: str, exc: Optional[BaseException] = None) -> JSONResponse:
    details = None
    if exc is not None and settings.diagnostics_enabled:
        details = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    body = ErrorResponse(error=message, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def _read_upload(file: UploadFile) -> CvDocument:
    try:
        content = await file.read(MAX_SIZE + 1)
    finally:
        await file.close()
    if len(content) > MAX_SIZE:
        raise ValueError(f"File too large. Max {settings.MAX_UPLOAD_SIZE_MB} MB.")
    return CvDocument(content=content, media_type=file.content_type, filename=file.filename)


@router.post(
    "/analyze",
    response_model=AnalysisResponse,
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def analyze(
    job_url: Optional[str] = Form(None, alias="jobUrl"),
    cv: Optional[UploadFile] = File(None),
    pipeline: AnalysisPipeline = Depends(get_pipeline),
):
    """Analyse how well an uploaded CV fits the job posting at ``job_url``."""
    document = None
    if cv is not None:
        try:
            document = await _read_upload(cv)
        except ValueError as exc:
            return error_response(413, str(exc), exc)
        logger.info("CV file: %s %s", cv.filename, cv.content_type)

    try:
        analysis = await pipeline.run(job_url, document)
    except PipelineError as exc:
        logger.error("Analysis failed [%s]: %s", exc.kind.value, exc.message, extra={"kind": exc.kind.value})
        return error_response(STATUS_BY_KIND.get(exc.kind, 500), exc.message, exc)

    return AnalysisResponse(analysis=analysis)
