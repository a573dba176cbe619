"""Unit tests for the Gemini upload service."""

from unittest.mock import AsyncMock

import httpx
import pytest

from src.video_qa.config import VideoQAConfig
from src.video_qa.errors import (
    LocalTimeoutError,
    NoIdentifierFoundError,
    ProtocolError,
    RemoteRequestError,
    Stage,
    UploadProcessingError,
)
from src.video_qa.upload_service import UploadService

VIDEO_URL = "https://youtu.be/abc123?t=5"


def file_response(state: str, name: str | None = "files/abc", uri: str = "ref://1"):
    file = {"uri": uri, "state": state}
    if name is not None:
        file["name"] = name
    return httpx.Response(200, json={"file": file})


def file_state(state: str) -> httpx.Response:
    return httpx.Response(200, json={"name": "files/abc", "uri": "ref://1", "state": state})


@pytest.mark.unit
class TestUploadService:
    """Test suite for UploadService class."""

    @pytest.fixture
    def sleep(self) -> AsyncMock:
        return AsyncMock()

    def build(self, config: VideoQAConfig, client: httpx.AsyncClient, sleep: AsyncMock):
        return UploadService(config, client, sleep=sleep)

    def test_display_name(self) -> None:
        """Test the display name is derived from the video identifier."""
        assert UploadService.display_name_for(VIDEO_URL) == "youtube_transcript_abc123.txt"

    @pytest.mark.asyncio
    async def test_upload_active_file(self, config, make_client, sleep) -> None:
        """Test an ACTIVE upload returns its URI without waiting."""
        client, transport = make_client(
            {("POST", "/upload/v1beta/files"): file_response("ACTIVE")}
        )
        service = self.build(config, client, sleep)

        artifact_ref = await service.upload("hello world", VIDEO_URL)

        assert artifact_ref == "ref://1"
        sleep.assert_not_awaited()

        request = transport.requests[0]
        assert request.url.params["key"] == "gemini_test_key"
        assert request.headers["X-Goog-Upload-Protocol"] == "multipart"
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        body = request.content.decode()
        assert "youtube_transcript_abc123.txt" in body
        assert "hello world" in body
        assert "text/plain" in body

    @pytest.mark.asyncio
    async def test_upload_without_file_name(self, config, make_client, sleep) -> None:
        """Test a response with only uri and state is enough."""
        client, _ = make_client(
            {("POST", "/upload/v1beta/files"): file_response("ACTIVE", name=None)}
        )
        service = self.build(config, client, sleep)

        assert await service.upload("hello world", VIDEO_URL) == "ref://1"

    @pytest.mark.asyncio
    async def test_processing_file_waits_once(self, config, make_client, sleep) -> None:
        """Test a non-ACTIVE file gets one fixed wait and is returned optimistically."""
        client, transport = make_client(
            {("POST", "/upload/v1beta/files"): file_response("PROCESSING")}
        )
        service = self.build(config, client, sleep)

        artifact_ref = await service.upload("hello world", VIDEO_URL)

        assert artifact_ref == "ref://1"
        sleep.assert_awaited_once_with(3)
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_upload_rejected(self, config, make_client, sleep) -> None:
        """Test a non-success upload carries status and body."""
        client, _ = make_client(
            {("POST", "/upload/v1beta/files"): httpx.Response(400, text="bad request")}
        )
        service = self.build(config, client, sleep)

        with pytest.raises(RemoteRequestError) as exc_info:
            await service.upload("hello world", VIDEO_URL)

        assert exc_info.value.status_code == 400
        assert exc_info.value.body == "bad request"
        assert exc_info.value.stage is Stage.UPLOAD

    @pytest.mark.asyncio
    async def test_upload_response_missing_uri(self, config, make_client, sleep) -> None:
        """Test a file object without a URI is a protocol error."""
        client, _ = make_client(
            {
                ("POST", "/upload/v1beta/files"): httpx.Response(
                    200, json={"file": {"name": "files/abc", "state": "ACTIVE"}}
                )
            }
        )
        service = self.build(config, client, sleep)

        with pytest.raises(ProtocolError):
            await service.upload("hello world", VIDEO_URL)

    @pytest.mark.asyncio
    async def test_upload_invalid_url(self, config, make_client, sleep) -> None:
        """Test an unresolvable URL fails before anything is sent."""
        client, transport = make_client({})
        service = self.build(config, client, sleep)

        with pytest.raises(NoIdentifierFoundError):
            await service.upload("hello world", "https://example.com/video")

        assert transport.requests == []


@pytest.mark.unit
class TestUploadStateChecks:
    """Test suite for polling the uploaded file until it is ACTIVE."""

    @pytest.fixture
    def checked_config(self, config: VideoQAConfig) -> VideoQAConfig:
        config.upload_state_checks = 3
        return config

    @pytest.fixture
    def sleep(self) -> AsyncMock:
        return AsyncMock()

    @pytest.mark.asyncio
    async def test_polls_until_active(self, checked_config, make_client, sleep) -> None:
        """Test the file is polled until it reports ACTIVE."""
        client, transport = make_client(
            {
                ("POST", "/upload/v1beta/files"): file_response("PROCESSING"),
                ("GET", "/v1beta/files/abc"): [
                    file_state("PROCESSING"),
                    file_state("ACTIVE"),
                ],
            }
        )
        service = UploadService(checked_config, client, sleep=sleep)

        assert await service.upload("hello world", VIDEO_URL) == "ref://1"
        assert transport.count("GET", "/v1beta/files/abc") == 2
        assert sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_failed_state(self, checked_config, make_client, sleep) -> None:
        """Test a FAILED file state stops polling."""
        client, _ = make_client(
            {
                ("POST", "/upload/v1beta/files"): file_response("PROCESSING"),
                ("GET", "/v1beta/files/abc"): httpx.Response(
                    200, json={"name": "files/abc", "uri": "ref://1", "state": "FAILED"}
                ),
            }
        )
        service = UploadService(checked_config, client, sleep=sleep)

        with pytest.raises(UploadProcessingError) as exc_info:
            await service.upload("hello world", VIDEO_URL)

        assert exc_info.value.state == "FAILED"

    @pytest.mark.asyncio
    async def test_check_budget_exhausted(self, checked_config, make_client, sleep) -> None:
        """Test a file that stays PROCESSING raises LocalTimeoutError."""
        client, transport = make_client(
            {
                ("POST", "/upload/v1beta/files"): file_response("PROCESSING"),
                ("GET", "/v1beta/files/abc"): httpx.Response(
                    200, json={"name": "files/abc", "uri": "ref://1", "state": "PROCESSING"}
                ),
            }
        )
        service = UploadService(checked_config, client, sleep=sleep)

        with pytest.raises(LocalTimeoutError) as exc_info:
            await service.upload("hello world", VIDEO_URL)

        assert exc_info.value.attempts == 3
        assert exc_info.value.stage is Stage.UPLOAD
        assert transport.count("GET", "/v1beta/files/abc") == 3

    @pytest.mark.asyncio
    async def test_no_name_to_poll(self, checked_config, make_client, sleep) -> None:
        """Test state checks need a file name from the upload response."""
        client, _ = make_client(
            {("POST", "/upload/v1beta/files"): file_response("PROCESSING", name=None)}
        )
        service = UploadService(checked_config, client, sleep=sleep)

        with pytest.raises(ProtocolError):
            await service.upload("hello world", VIDEO_URL)
