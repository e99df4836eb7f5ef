"""Résumé text extraction service.

Supported formats:
  - PDF   → PyPDF2 text layer (image-only PDFs yield an empty string)
  - DOCX  → python-docx paragraphs and table cells
  - DOC   → rejected; the legacy binary format has no decoder here

The document kind is resolved once from the declared media type or the
filename suffix, then looked up in a decoder table.
"""

from __future__ import annotations

import io
import logging
from typing import Callable

import docx
from PyPDF2 import PdfReader

from cvfit.core.errors import ErrorKind, PipelineError
from cvfit.shared.models import CvDocument, DocumentKind

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_MEDIA_TYPE = "application/msword"

# Checked in order; first match wins.
_KIND_RULES: tuple[tuple[DocumentKind, str, str], ...] = (
    (DocumentKind.PDF, PDF_MEDIA_TYPE, ".pdf"),
    (DocumentKind.DOCX, DOCX_MEDIA_TYPE, ".docx"),
    (DocumentKind.LEGACY_DOC, DOC_MEDIA_TYPE, ".doc"),
)


def resolve_kind(media_type: str | None, filename: str | None) -> DocumentKind:
    """Classify a document by declared media type OR filename extension."""
    media = (media_type or "").split(";", 1)[0].strip().lower()
    name = (filename or "").strip().lower()
    for kind, rule_media, suffix in _KIND_RULES:
        if media == rule_media or name.endswith(suffix):
            return kind
    return DocumentKind.UNSUPPORTED


def _decode_pdf(content: bytes) -> str:
    reader = PdfReader(io.BytesIO(content))
    pages = [page.extract_text() or "" for page in reader.pages]
    return "\n\n".join(pages).strip()


def _decode_docx(content: bytes) -> str:
    document = docx.Document(io.BytesIO(content))
    lines = [p.text for p in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            lines.extend(cell.text for cell in row.cells)
    return "\n".join(lines).strip()


_DECODERS: dict[DocumentKind, Callable[[bytes], str]] = {
    DocumentKind.PDF: _decode_pdf,
    DocumentKind.DOCX: _decode_docx,
}


def extract_text(document: CvDocument) -> str:
    """Return the plain text of ``document``.

    Raises PipelineError with kind LegacyFormatUnsupported, UnsupportedFormat
    or DecodeFailure. Decoder exceptions never escape unwrapped.
    """
    kind = resolve_kind(document.media_type, document.filename)

    if kind is DocumentKind.LEGACY_DOC:
        raise PipelineError(
            ErrorKind.LEGACY_FORMAT_UNSUPPORTED,
            "The .doc format is not supported. Please upload a .docx or .pdf file",
        )

    decoder = _DECODERS.get(kind)
    if decoder is None:
        raise PipelineError(
            ErrorKind.UNSUPPORTED_FORMAT,
            f"Unsupported format: {document.media_type}",
        )

    try:
        text = decoder(document.content)
    except Exception as exc:
        logger.error("%s decode failed for %s: %s", kind.value, document.filename, exc)
        raise PipelineError(
            ErrorKind.DECODE_FAILURE,
            f"Could not read the {kind.value.upper()} file",
        ) from exc

    logger.info(
        "Extracted %d characters from %s (%s)", len(text), document.filename, kind.value,
        extra={"chars": len(text)},
    )
    return text
