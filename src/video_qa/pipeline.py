"""Main pipeline orchestrator for video indexing and question answering."""

import httpx

from src.utils.clients import get_http_client
from src.utils.logging import get_logger

from .answer_service import AnswerService
from .cache import ArtifactCache
from .config import VideoQAConfig, get_config
from .errors import VideoQAError
from .schemas import ArtifactReference, VideoReference
from .transcript_service import TranscriptService
from .upload_service import UploadService

logger = get_logger(__name__)


class VideoQAPipeline:
    """Orchestrates transcript fetching, uploading and question answering.

    ``index`` fetches a video's transcript and uploads it, returning the
    artifact reference. ``ask`` and ``query`` index the video and then ask a
    question against the fresh reference. Without a cache every question
    re-runs the whole index step; pass an ArtifactCache to reuse references
    for videos already indexed by this pipeline.

    The pipeline owns the HTTP client it creates and closes it on ``aclose``
    or when used as an async context manager.
    """

    def __init__(
        self,
        config: VideoQAConfig | None = None,
        client: httpx.AsyncClient | None = None,
        cache: ArtifactCache | None = None,
    ):
        """Initialize pipeline with all required services.

        Args:
            config: Configuration object. If None, loads from environment.
            client: HTTP client to use. If None, one is created and owned here.
            cache: Optional artifact cache consulted by ``ask`` and ``query``.

        Raises:
            ConfigurationError: If an API key is missing.
        """
        self.config = config or get_config()
        self.config.require_credentials()

        self._owns_client = client is None
        self.client = client or get_http_client(self.config.request_timeout_seconds)
        self.cache = cache

        self.transcript_service = TranscriptService(self.config, self.client)
        self.upload_service = UploadService(self.config, self.client)
        self.answer_service = AnswerService(self.config, self.client)

        logger.info("pipeline_initialized", cache_enabled=cache is not None)

    async def __aenter__(self) -> "VideoQAPipeline":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def index(self, url: str) -> ArtifactReference:
        """Fetch a video's transcript and upload it.

        The URL is resolved before any job is submitted so that an
        unrecognised URL fails without spending a scraper run.

        Args:
            url: Video URL.

        Returns:
            Artifact reference (file URI) of the uploaded transcript.

        Raises:
            VideoQAError: If any stage fails.
        """
        video = VideoReference.from_url(url)
        logger.info("index_started", video_id=video.video_id)

        try:
            record = await self.transcript_service.fetch(video.url)
            artifact_ref = await self.upload_service.upload(record.text, video.url)
        except VideoQAError as e:
            logger.error(
                "index_failed",
                video_id=video.video_id,
                stage=str(e.stage),
                error_type=type(e).__name__,
            )
            raise

        if self.cache is not None:
            self.cache.put(video.video_id, artifact_ref)

        logger.info("index_completed", video_id=video.video_id, artifact_ref=artifact_ref)
        return artifact_ref

    async def ask(self, url: str, question: str) -> str:
        """Answer a question about a video, indexing it first.

        Args:
            url: Video URL.
            question: Natural-language question.

        Returns:
            Answer text.
        """
        artifact_ref = await self._artifact_for(url)
        return await self.answer_service.ask(artifact_ref, question)

    async def query(self, url: str, question: str) -> str:
        """Index a video and immediately ask a question about it."""
        return await self.ask(url, question)

    async def _artifact_for(self, url: str) -> ArtifactReference:
        if self.cache is not None:
            video = VideoReference.from_url(url)
            cached = self.cache.get(video.video_id)
            if cached is not None:
                logger.info("index_skipped", video_id=video.video_id, artifact_ref=cached)
                return cached

        return await self.index(url)
