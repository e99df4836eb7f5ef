"""HTML → readable plain text for job postings.

Boilerplate subtrees (scripts, styles, navigation, page header/footer,
embedded frames) are dropped before text extraction so that menus and
cookie banners do not drown out the posting itself.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

from cvfit.core.errors import ErrorKind, PipelineError

NON_CONTENT_TAGS = ("script", "style", "nav", "header", "footer", "iframe", "noscript")
MAX_JOB_TEXT_CHARS = 8000
MIN_JOB_TEXT_CHARS = 100

_WHITESPACE = re.compile(r"\s+")


def reduce_html(
    html: str,
    *,
    max_chars: int = MAX_JOB_TEXT_CHARS,
    min_chars: int = MIN_JOB_TEXT_CHARS,
) -> str:
    """Return the visible body text of ``html``, whitespace-collapsed.

    The result is cut to ``max_chars`` (mid-word if need be). Raises
    PipelineError(ContentTooShort) when fewer than ``min_chars`` remain.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    for tag in soup(list(NON_CONTENT_TAGS)):
        tag.decompose()

    root = soup.body if soup.body is not None else soup
    text = _WHITESPACE.sub(" ", root.get_text(separator=" ")).strip()

    if len(text) > max_chars:
        text = text[:max_chars]

    if len(text) < min_chars:
        raise PipelineError(
            ErrorKind.CONTENT_TOO_SHORT,
            f"Too little content on the job posting page ({len(text)} characters)",
        )
    return text
