from __future__ import annotations

import asyncio

import httpx
import pytest

from cvfit.core.errors import ErrorKind, PipelineError
from cvfit.services.page_fetcher import BROWSER_USER_AGENT, PageFetcher

from helpers import JOB_PAGE, page_transport


async def test_returns_page_body_with_browser_identity():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, html=JOB_PAGE)

    page = await PageFetcher(transport=httpx.MockTransport(handler)).fetch("https://jobs.example/42")

    assert page.status_code == 200
    assert page.text == JOB_PAGE
    assert page.url == "https://jobs.example/42"
    assert seen[0].headers["user-agent"] == BROWSER_USER_AGENT


async def test_follows_redirects():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/short":
            return httpx.Response(302, headers={"Location": "https://jobs.example/full"})
        return httpx.Response(200, html=JOB_PAGE)

    page = await PageFetcher(transport=httpx.MockTransport(handler)).fetch("https://jobs.example/short")

    assert page.url == "https://jobs.example/full"


async def test_redirect_budget_is_enforced():
    hops: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        hops.append(request.url.path)
        return httpx.Response(302, headers={"Location": f"https://jobs.example/{len(hops)}"})

    with pytest.raises(PipelineError) as excinfo:
        await PageFetcher(transport=httpx.MockTransport(handler)).fetch("https://jobs.example/0")

    assert excinfo.value.kind is ErrorKind.FETCH_FAILURE
    assert len(hops) == 6


@pytest.mark.parametrize("status_code", [403, 404, 500])
async def test_non_success_status_is_fetch_failure(status_code):
    fetcher = PageFetcher(transport=page_transport(status_code=status_code))

    with pytest.raises(PipelineError) as excinfo:
        await fetcher.fetch("https://jobs.example/42")
    assert excinfo.value.kind is ErrorKind.FETCH_FAILURE
    assert str(status_code) in excinfo.value.message


async def test_network_error_is_fetch_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PipelineError) as excinfo:
        await PageFetcher(transport=httpx.MockTransport(handler)).fetch("https://jobs.example/42")
    assert excinfo.value.kind is ErrorKind.FETCH_FAILURE


async def test_slow_server_times_out():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, html=JOB_PAGE)

    fetcher = PageFetcher(timeout=0.05, transport=httpx.MockTransport(handler))

    with pytest.raises(PipelineError) as excinfo:
        await fetcher.fetch("https://jobs.example/42")
    assert excinfo.value.kind is ErrorKind.FETCH_FAILURE
    assert "timeout" in excinfo.value.message


async def test_invalid_url_is_fetch_failure():
    with pytest.raises(PipelineError) as excinfo:
        await PageFetcher(transport=page_transport()).fetch("not a url")
    assert excinfo.value.kind is ErrorKind.FETCH_FAILURE
