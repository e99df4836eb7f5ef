"""Shared fixtures: fake HTTP servers wired into a pipeline."""

from __future__ import annotations

import httpx
import pytest

from cvfit.services.analysis_client import AnalysisClient
from cvfit.services.page_fetcher import PageFetcher
from cvfit.services.pipeline import AnalysisPipeline

from helpers import FakeOpenAI, page_transport


@pytest.fixture
def fake_openai() -> FakeOpenAI:
    return FakeOpenAI()


@pytest.fixture
def build_pipeline():
    def _build(
        page: httpx.AsyncBaseTransport | None = None,
        openai: FakeOpenAI | None = None,
        api_key: str | None = "sk-test",
        **kwargs,
    ) -> AnalysisPipeline:
        openai = openai or FakeOpenAI()
        return AnalysisPipeline(
            fetcher=PageFetcher(transport=page or page_transport()),
            analyzer=AnalysisClient(api_key, transport=openai.transport()),
            **kwargs,
        )

    return _build
