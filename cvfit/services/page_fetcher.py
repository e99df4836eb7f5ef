"""HTTP client for job posting pages.

One attempt per request, no retries: a user is waiting on the other end.
Every failure (network, timeout, redirect loop, non-2xx) surfaces as
PipelineError(FetchFailure); only the message differs.
"""

from __future__ import annotations

import asyncio
import logging
import time

import httpx

from cvfit.core.errors import ErrorKind, PipelineError
from cvfit.shared.models import RawPage

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
FETCH_TIMEOUT = 15.0
MAX_REDIRECTS = 5


class PageFetcher:
    """Fetches a single URL with a browser identity and bounded wait."""

    def __init__(
        self,
        timeout: float = FETCH_TIMEOUT,
        max_redirects: int = MAX_REDIRECTS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._max_redirects = max_redirects
        self._transport = transport

    async def fetch(self, url: str) -> RawPage:
        try:
            scheme = httpx.URL(url).scheme
        except httpx.InvalidURL as exc:
            raise PipelineError(ErrorKind.FETCH_FAILURE, f"invalid URL: {exc}") from exc
        if scheme not in ("http", "https"):
            raise PipelineError(ErrorKind.FETCH_FAILURE, f"unsupported URL: {url}")

        start = time.perf_counter()
        try:
            # httpx timeouts are per phase; wait_for bounds the whole exchange
            page = await asyncio.wait_for(self._get(url), timeout=self._timeout)
        except asyncio.TimeoutError:
            raise PipelineError(
                ErrorKind.FETCH_FAILURE,
                f"timeout of {self._timeout:g}s exceeded",
            ) from None
        except httpx.HTTPStatusError as exc:
            raise PipelineError(
                ErrorKind.FETCH_FAILURE,
                f"server responded with status {exc.response.status_code}",
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise PipelineError(ErrorKind.FETCH_FAILURE, str(exc) or type(exc).__name__) from exc

        latency_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "Fetched %s status=%d latency=%.1f ms", page.url, page.status_code, latency_ms,
            extra={"latency_ms": latency_ms, "status_code": page.status_code},
        )
        return page

    async def _get(self, url: str) -> RawPage:
        async with httpx.AsyncClient(
            headers={"User-Agent": BROWSER_USER_AGENT},
            timeout=self._timeout,
            follow_redirects=True,
            max_redirects=self._max_redirects,
            transport=self._transport,
        ) as client:
            resp = await client.get(url)
            resp.raise_for_status()

        return RawPage(
            url=str(resp.url),
            status_code=resp.status_code,
            content_type=resp.headers.get("content-type"),
            text=resp.text,
        )
