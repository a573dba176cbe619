"""Shared fixtures for video Q&A tests.

HTTP calls are served by ``httpx.MockTransport``. Routes are keyed by
``(method, path suffix)``; a list value is consumed one response per request,
any other value is returned for every matching request.
"""

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from src.video_qa.config import VideoQAConfig

Routes = dict[tuple[str, str], Any]


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, routes: Routes):
        self.routes = routes
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for (method, suffix), response in self.routes.items():
            if request.method == method and request.url.path.endswith(suffix):
                if isinstance(response, list):
                    response = response.pop(0)
                if callable(response):
                    return response(request)
                return response
        return httpx.Response(404, text=f"no route for {request.method} {request.url.path}")

    def count(self, method: str, suffix: str) -> int:
        return sum(
            1
            for request in self.requests
            if request.method == method and request.url.path.endswith(suffix)
        )


@pytest.fixture
def config() -> VideoQAConfig:
    """Test configuration with fixed credentials and the default polling budget."""
    return VideoQAConfig(
        apify_api_key="apify_test_key",
        gemini_api_key="gemini_test_key",
        apify_base_url="https://api.apify.test/v2",
        apify_actor_id="streamers~youtube-scraper",
        gemini_base_url="https://gemini.test",
        gemini_model="gemini-1.5-flash",
        max_results=1,
        poll_interval_seconds=5,
        max_poll_attempts=60,
        upload_wait_seconds=3,
        upload_state_checks=0,
        request_timeout_seconds=300,
    )


@pytest.fixture
def make_client() -> Callable[[Routes], tuple[httpx.AsyncClient, RecordingTransport]]:
    """Factory returning an AsyncClient wired to a RecordingTransport."""

    def factory(routes: Routes) -> tuple[httpx.AsyncClient, RecordingTransport]:
        transport = RecordingTransport(routes)
        return httpx.AsyncClient(transport=transport), transport

    return factory
