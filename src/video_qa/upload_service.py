"""Upload service for pushing transcripts to the Gemini File API."""

import asyncio
import json

import httpx

from src.utils.logging import get_logger

from .config import VideoQAConfig
from .errors import LocalTimeoutError, ProtocolError, Stage, UploadProcessingError
from .http import parse_model, request_json
from .resolver import resolve_video_id
from .schemas import ArtifactReference, GeminiFileResponse, UploadedFile
from .transcript_service import Sleep

logger = get_logger(__name__)

SERVICE_NAME = "Gemini file upload"


class UploadService:
    """Service for uploading transcript text to the Gemini File API.

    The upload is a single multipart request (JSON metadata + raw text). The
    returned file URI is the artifact reference later handed to the answer
    service.

    A freshly uploaded file may not be ACTIVE yet. By default the service waits
    once and returns the URI without confirming the state; the generation call
    can still race the file's processing. Setting ``upload_state_checks`` makes
    it poll the file until it is ACTIVE instead.
    """

    def __init__(
        self,
        config: VideoQAConfig,
        client: httpx.AsyncClient,
        sleep: Sleep = asyncio.sleep,
    ):
        self.config = config
        self.client = client
        self.sleep = sleep
        logger.info(
            "upload_service_initialized",
            upload_wait_seconds=config.upload_wait_seconds,
            upload_state_checks=config.upload_state_checks,
        )

    @property
    def _auth(self) -> dict[str, str]:
        return {"key": self.config.gemini_api_key}

    @staticmethod
    def display_name_for(video_url: str) -> str:
        return f"youtube_transcript_{resolve_video_id(video_url)}.txt"

    async def upload(self, text: str, video_url: str) -> ArtifactReference:
        """Upload transcript text and return its file URI.

        Args:
            text: Transcript text.
            video_url: Source video URL, used to derive the display name.

        Returns:
            The uploaded file's URI.

        Raises:
            VideoQAError: If the upload is rejected, the response is malformed,
                or (with state checks enabled) the file never becomes ACTIVE.
        """
        display_name = self.display_name_for(video_url)
        logger.info("uploading_transcript", display_name=display_name, text_length=len(text))

        metadata = {"file": {"display_name": display_name}}
        payload = await request_json(
            self.client,
            "POST",
            f"{self.config.gemini_base_url.rstrip('/')}/upload/v1beta/files",
            params=self._auth,
            headers={"X-Goog-Upload-Protocol": "multipart"},
            files={
                "metadata": (None, json.dumps(metadata), "application/json"),
                "file": (display_name, text.encode("utf-8"), "text/plain"),
            },
            service=SERVICE_NAME,
            stage=Stage.UPLOAD,
        )
        uploaded = parse_model(
            GeminiFileResponse, payload, service=SERVICE_NAME, stage=Stage.UPLOAD
        ).file

        logger.info(
            "transcript_uploaded",
            name=uploaded.name,
            uri=uploaded.uri,
            state=uploaded.state,
        )

        if not uploaded.is_active:
            if self.config.upload_state_checks > 0:
                await self.wait_until_active(uploaded)
            else:
                logger.info(
                    "waiting_for_file_processing", seconds=self.config.upload_wait_seconds
                )
                await self.sleep(self.config.upload_wait_seconds)

        return uploaded.uri

    async def get_file(self, name: str) -> UploadedFile:
        """Fetch the current metadata of an uploaded file (``files/<id>``)."""
        payload = await request_json(
            self.client,
            "GET",
            f"{self.config.gemini_base_url.rstrip('/')}/v1beta/{name}",
            params=self._auth,
            service="Gemini file lookup",
            stage=Stage.UPLOAD,
        )
        return parse_model(
            UploadedFile, payload, service="Gemini file lookup", stage=Stage.UPLOAD
        )

    async def wait_until_active(self, uploaded: UploadedFile) -> UploadedFile:
        """Poll the file state until ACTIVE.

        Raises:
            ProtocolError: If the upload response carried no file name to poll.
            UploadProcessingError: If the file enters the FAILED state.
            LocalTimeoutError: If it is still processing after the check budget.
        """
        if not uploaded.name:
            raise ProtocolError("Upload response has no file name to poll", Stage.UPLOAD)

        checks = self.config.upload_state_checks
        for attempt in range(1, checks + 1):
            await self.sleep(self.config.upload_wait_seconds)

            current = await self.get_file(uploaded.name)
            if current.is_active:
                logger.info("file_active", name=uploaded.name, attempts=attempt)
                return current
            if current.state == "FAILED":
                logger.error("file_processing_failed", name=uploaded.name)
                raise UploadProcessingError(current.state)

        logger.error("file_processing_timed_out", name=uploaded.name, attempts=checks)
        raise LocalTimeoutError(checks, Stage.UPLOAD)
