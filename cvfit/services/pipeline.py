"""Fit-analysis pipeline: job URL + résumé document → narrative analysis.

Stages run strictly in order, each awaiting the previous one:

  START → FETCHED → REDUCED → EXTRACTED → VALIDATED → ANALYZED → DONE

The first PipelineError moves the run to FAILED. Errors are only caught
to prefix the message and record the stage; their kind is never changed
and nothing partial is returned.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from cvfit.core.config import Settings
from cvfit.core.errors import ErrorKind, PipelineError
from cvfit.services.analysis_client import AnalysisClient
from cvfit.services.document_extractor import extract_text
from cvfit.services.page_fetcher import PageFetcher
from cvfit.services.text_reducer import reduce_html
from cvfit.shared.models import CvDocument, PipelineStage

logger = logging.getLogger(__name__)

FETCH_CONTEXT = "Could not fetch the job posting: "
EXTRACT_CONTEXT = "Could not read the CV: "


class AnalysisPipeline:
    """Runs one request through fetch, reduce, extract, validate, analyze."""

    def __init__(
        self,
        fetcher: PageFetcher,
        analyzer: AnalysisClient,
        *,
        reducer: Callable[[str], str] = reduce_html,
        extractor: Callable[[CvDocument], str] = extract_text,
    ) -> None:
        self._fetcher = fetcher
        self._analyzer = analyzer
        self._reduce = reducer
        self._extract = extractor

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnalysisPipeline":
        def reducer(html: str) -> str:
            return reduce_html(
                html,
                max_chars=settings.JOB_TEXT_MAX_CHARS,
                min_chars=settings.JOB_TEXT_MIN_CHARS,
            )

        return cls(
            fetcher=PageFetcher(
                timeout=settings.FETCH_TIMEOUT_S,
                max_redirects=settings.FETCH_MAX_REDIRECTS,
            ),
            analyzer=AnalysisClient(
                settings.OPENAI_API_KEY,
                base_url=settings.OPENAI_BASE_URL,
                model=settings.OPENAI_MODEL,
                language=settings.ANALYSIS_LANGUAGE,
                temperature=settings.ANALYSIS_TEMPERATURE,
                max_tokens=settings.ANALYSIS_MAX_TOKENS,
                answer_max_chars=settings.ANALYSIS_ANSWER_MAX_CHARS,
                section_max_chars=settings.PROMPT_SECTION_MAX_CHARS,
                cv_min_chars=settings.CV_MIN_CHARS,
                job_min_chars=settings.JOB_MIN_CHARS,
                timeout=settings.ANALYSIS_TIMEOUT_S,
            ),
            reducer=reducer,
        )

    async def run(self, job_url: Optional[str], document: Optional[CvDocument]) -> str:
        if not job_url or not job_url.strip() or document is None or not document.content:
            raise PipelineError(
                ErrorKind.MISSING_INPUT,
                "Missing required data (jobUrl or cv)",
                stage=PipelineStage.START.value,
            )

        stage = PipelineStage.START
        try:
            logger.info("Fetching job offer: %s", job_url, extra={"stage": stage.value})
            page = await self._fetcher.fetch(job_url.strip())
            stage = PipelineStage.FETCHED

            job_text = self._reduce(page.text)
            stage = PipelineStage.REDUCED
            logger.info(
                "Job description length: %d", len(job_text),
                extra={"stage": stage.value, "chars": len(job_text)},
            )
        except PipelineError as exc:
            self._fail(exc, stage, FETCH_CONTEXT)
            raise

        try:
            cv_text = self._extract(document)
            stage = PipelineStage.EXTRACTED
            logger.info(
                "CV content length: %d", len(cv_text),
                extra={"stage": stage.value, "chars": len(cv_text)},
            )
        except PipelineError as exc:
            self._fail(exc, stage, EXTRACT_CONTEXT)
            raise

        try:
            self._analyzer.check_preconditions(job_text, cv_text)
            stage = PipelineStage.VALIDATED

            analysis = await self._analyzer.analyze(job_text, cv_text)
            stage = PipelineStage.ANALYZED
        except PipelineError as exc:
            self._fail(exc, stage)
            raise

        logger.info("Analysis complete", extra={"stage": PipelineStage.DONE.value})
        return analysis

    @staticmethod
    def _fail(exc: PipelineError, stage: PipelineStage, prefix: str = "") -> None:
        exc.with_context(prefix, stage=stage.value)
        logger.warning(
            "Pipeline failed after %s: %s", stage.value, exc.message,
            extra={"stage": PipelineStage.FAILED.value, "kind": exc.kind.value},
        )
