"""FastAPI application entrypoint.

Responsibilities:
  - CORS and method gating for the public /analyze endpoint
  - Logging setup
  - Catch-all error response for anything the pipeline did not classify

NOT responsible for:
  - Fetching, extraction or the LLM call (cvfit.services.pipeline)
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from cvfit import __version__
from cvfit.core.config import settings
from cvfit.routers import analyze
from cvfit.shared.logging_config import setup_logging

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="CV Fit Analyzer",
    version=__version__,
    description="Compares a CV against a job posting URL using an LLM",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(analyze.router, tags=["analyze"])


@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s: %s", request.url.path, exc)
    return analyze.error_response(500, "An unknown error occurred", exc)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}
