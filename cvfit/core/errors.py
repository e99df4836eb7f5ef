"""Error taxonomy for the analysis pipeline.

Every stage raises exactly one PipelineError whose ``kind`` is a member of
ErrorKind. Callers branch on the kind value; the message is for humans.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    MISSING_INPUT = "MissingInput"
    FETCH_FAILURE = "FetchFailure"
    CONTENT_TOO_SHORT = "ContentTooShort"
    UNSUPPORTED_FORMAT = "UnsupportedFormat"
    LEGACY_FORMAT_UNSUPPORTED = "LegacyFormatUnsupported"
    DECODE_FAILURE = "DecodeFailure"
    CV_TOO_SHORT = "CvTooShort"
    JOB_DESCRIPTION_TOO_SHORT = "JobDescriptionTooShort"
    MISSING_CREDENTIAL = "MissingCredential"
    INVALID_CREDENTIAL = "InvalidCredential"
    RATE_LIMITED = "RateLimited"
    REMOTE_SERVICE_ERROR = "RemoteServiceError"


class PipelineError(Exception):
    """Terminal failure of a single pipeline run."""

    def __init__(self, kind: ErrorKind, message: str, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.stage = stage

    def with_context(self, prefix: str = "", stage: Optional[str] = None) -> "PipelineError":
        """Prefix the message and record the stage; the kind never changes."""
        self.message = f"{prefix}{self.message}"
        self.args = (self.message,)
        if stage is not None:
            self.stage = stage
        return self

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"PipelineError(kind={self.kind.value!r}, stage={self.stage!r}, message={self.message!r})"
