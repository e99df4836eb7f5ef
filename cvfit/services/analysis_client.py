"""HTTP client for the remote reasoning service (OpenAI chat completions).

Builds a size-bounded prompt from the job posting and résumé text, sends
a single request with no retry, and translates provider failures into
the pipeline error taxonomy:

  401            → InvalidCredential
  429            → RateLimited
  anything else  → RemoteServiceError (provider message when available)

The credential is passed in by the caller; this module never reads the
environment.
"""

from __future__ import annotations

import asyncio
import logging
import time

import httpx

from cvfit.core.errors import ErrorKind, PipelineError
from cvfit.shared.models import AnalysisRequest, ChatMessage

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
TIMEOUT = 30.0
SECTION_MAX_CHARS = 6000
MIN_TEXT_CHARS = 50

_SYSTEM_PROMPT = (
    "You are an HR expert and career coach. You help candidates tailor their CV "
    "to specific job offers. You write in {language}, concretely and to the point."
)

_USER_PROMPT = """\
Analyse the candidate's CV against the job offer and give concrete recommendations.

JOB OFFER:
{job_text}

CANDIDATE CV:
{cv_text}

Analyse and provide:
1. **Overall fit** - how well the CV matches the offer (%)
2. **What is OK** - which requirements the candidate meets
3. **What is missing** - key gaps in the CV relative to the offer
4. **Concrete changes** - what to add or change in the CV (bullet points)
5. **Keywords** - which keywords to add

Answer in {language}, at most {answer_max_chars} characters."""


class AnalysisClient:
    """Composes the fit-analysis prompt and dispatches it."""

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        language: str = "English",
        temperature: float = 0.7,
        max_tokens: int = 1500,
        answer_max_chars: int = 1500,
        section_max_chars: int = SECTION_MAX_CHARS,
        cv_min_chars: int = MIN_TEXT_CHARS,
        job_min_chars: int = MIN_TEXT_CHARS,
        timeout: float = TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._language = language
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._answer_max_chars = answer_max_chars
        self._section_max_chars = section_max_chars
        self._cv_min_chars = cv_min_chars
        self._job_min_chars = job_min_chars
        self._timeout = timeout
        self._transport = transport

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def check_preconditions(self, job_text: str | None, cv_text: str | None) -> None:
        """Raise before any remote call if the request cannot succeed."""
        if not self._api_key:
            raise PipelineError(
                ErrorKind.MISSING_CREDENTIAL,
                "OPENAI_API_KEY is not configured",
            )
        if not cv_text or len(cv_text.strip()) < self._cv_min_chars:
            raise PipelineError(ErrorKind.CV_TOO_SHORT, "The CV is empty or too short")
        if not job_text or len(job_text.strip()) < self._job_min_chars:
            raise PipelineError(
                ErrorKind.JOB_DESCRIPTION_TOO_SHORT,
                "The job description is empty or too short",
            )

    def build_request(self, job_text: str, cv_text: str) -> AnalysisRequest:
        limit = self._section_max_chars
        user_prompt = _USER_PROMPT.format(
            job_text=job_text[:limit],
            cv_text=cv_text[:limit],
            language=self._language,
            answer_max_chars=self._answer_max_chars,
        )
        return AnalysisRequest(
            model=self._model,
            messages=[
                ChatMessage(role="system", content=_SYSTEM_PROMPT.format(language=self._language)),
                ChatMessage(role="user", content=user_prompt),
            ],
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def analyze(self, job_text: str, cv_text: str) -> str:
        """Return the model's narrative analysis verbatim."""
        self.check_preconditions(job_text, cv_text)
        request = self.build_request(job_text, cv_text)

        start = time.perf_counter()
        try:
            # httpx timeouts are per phase; wait_for bounds the whole call
            resp = await asyncio.wait_for(self._post(request), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.error("Analysis call exceeded %.1f s", self._timeout)
            raise PipelineError(
                ErrorKind.REMOTE_SERVICE_ERROR,
                f"OpenAI error: timeout of {self._timeout:g}s exceeded",
            ) from None
        except httpx.HTTPStatusError as exc:
            raise _map_status_error(exc) from exc
        except httpx.HTTPError as exc:
            logger.error("Analysis call failed: %s", exc)
            raise PipelineError(
                ErrorKind.REMOTE_SERVICE_ERROR,
                f"OpenAI error: {str(exc) or type(exc).__name__}",
            ) from exc

        latency_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "Analysis call model=%s latency=%.1f ms", self._model, latency_ms,
            extra={"latency_ms": latency_ms, "status_code": resp.status_code},
        )

        try:
            content = resp.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise PipelineError(
                ErrorKind.REMOTE_SERVICE_ERROR,
                "OpenAI error: malformed completion response",
            ) from exc
        if not isinstance(content, str):
            # e.g. a refusal carries ``"content": null``
            raise PipelineError(
                ErrorKind.REMOTE_SERVICE_ERROR,
                "OpenAI error: malformed completion response",
            )
        return content

    async def _post(self, request: AnalysisRequest) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            resp = await client.post(
                f"{self._base_url}/chat/completions",
                json=request.model_dump(),
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
            resp.raise_for_status()
        return resp


def _provider_message(response: httpx.Response) -> str | None:
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return None


def _map_status_error(exc: httpx.HTTPStatusError) -> PipelineError:
    status = exc.response.status_code
    logger.error(
        "OpenAI responded %d: %s", status, exc.response.text[:500],
        extra={"status_code": status},
    )
    if status == 401:
        return PipelineError(ErrorKind.INVALID_CREDENTIAL, "Invalid OpenAI API key")
    if status == 429:
        return PipelineError(
            ErrorKind.RATE_LIMITED,
            "OpenAI request limit exceeded. Please try again in a moment.",
        )
    detail = _provider_message(exc.response) or str(exc)
    return PipelineError(ErrorKind.REMOTE_SERVICE_ERROR, f"OpenAI error: {detail}")
