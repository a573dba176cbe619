"""Transcript job client for fetching video transcripts via the Apify API."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from src.utils.logging import get_logger

from .config import VideoQAConfig
from .errors import (
    JobFailedError,
    LocalTimeoutError,
    NoTranscriptError,
    NoTranscriptTextError,
    ProtocolError,
    Stage,
)
from .http import parse_model, request_json
from .schemas import (
    ApifyDatasetItem,
    ApifyRun,
    ApifyRunInput,
    ApifyRunStatus,
    ApifyStartUrl,
    JobStatus,
    TranscriptRecord,
)

logger = get_logger(__name__)

SERVICE_NAME = "Apify"

Sleep = Callable[[float], Awaitable[Any]]


def _unwrap(payload: Any) -> Any:
    """Apify wraps run objects in a ``data`` envelope."""
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


class TranscriptService:
    """Client for the asynchronous transcript extraction job.

    One call to ``fetch`` drives a run through four steps: submit the job,
    poll its status on a fixed interval, collect the dataset items once it
    succeeds, and return the first item as a TranscriptRecord. Nothing is
    retried; any failure aborts the whole fetch.
    """

    def __init__(
        self,
        config: VideoQAConfig,
        client: httpx.AsyncClient,
        sleep: Sleep = asyncio.sleep,
    ):
        """Initialize the transcript service.

        Args:
            config: Configuration with the Apify key, actor and polling settings.
            client: Shared HTTP client.
            sleep: Awaitable sleep used between polls; tests pass a fake.
        """
        self.config = config
        self.client = client
        self.sleep = sleep
        logger.info(
            "transcript_service_initialized",
            actor_id=config.apify_actor_id,
            poll_interval_seconds=config.poll_interval_seconds,
            max_poll_attempts=config.max_poll_attempts,
        )

    @property
    def _actor_url(self) -> str:
        return f"{self.config.apify_base_url.rstrip('/')}/acts/{self.config.apify_actor_id}"

    @property
    def _auth(self) -> dict[str, str]:
        return {"token": self.config.apify_api_key}

    async def fetch(self, video_url: str) -> TranscriptRecord:
        """Fetch the transcript for a video.

        Args:
            video_url: Video URL handed to the scraper as its start URL.

        Returns:
            TranscriptRecord with the transcript text and optional metadata.

        Raises:
            VideoQAError: Any submit, poll or collect failure.
        """
        logger.info("fetching_transcript", video_url=video_url)

        run_id = await self.submit(video_url)
        await self.wait_for_completion(run_id)
        record = await self.collect(run_id, video_url)

        logger.info(
            "transcript_fetched",
            run_id=run_id,
            title=record.title,
            channel=record.channel_name,
            text_length=len(record.text),
        )
        return record

    async def submit(self, video_url: str) -> str:
        """Start an actor run for the video and return its run id."""
        run_input = ApifyRunInput(
            start_urls=[ApifyStartUrl(url=video_url)],
            max_results=self.config.max_results,
        )

        payload = await request_json(
            self.client,
            "POST",
            f"{self._actor_url}/runs",
            params=self._auth,
            json=run_input.model_dump(by_alias=True),
            service=SERVICE_NAME,
            stage=Stage.SUBMIT,
        )
        run = parse_model(ApifyRun, _unwrap(payload), service=SERVICE_NAME, stage=Stage.SUBMIT)

        logger.info("transcript_job_submitted", run_id=run.id)
        return run.id

    async def check_status(self, run_id: str) -> JobStatus:
        """Query the run once and map the reported status."""
        payload = await request_json(
            self.client,
            "GET",
            f"{self._actor_url}/runs/{run_id}",
            params=self._auth,
            service=SERVICE_NAME,
            stage=Stage.POLL,
        )
        run = parse_model(
            ApifyRunStatus, _unwrap(payload), service=SERVICE_NAME, stage=Stage.POLL
        )

        status = JobStatus.from_service(run.status)
        if status is JobStatus.FAILED or status is JobStatus.TIMED_OUT:
            logger.error("transcript_job_failed", run_id=run_id, reported_status=run.status)
            raise JobFailedError(run.status)
        return status

    async def wait_for_completion(self, run_id: str) -> int:
        """Poll until the run succeeds.

        Waits ``poll_interval_seconds`` before every status check, up to
        ``max_poll_attempts`` checks.

        Returns:
            Number of status checks performed.

        Raises:
            JobFailedError: If the service reports FAILED, ABORTED or TIMED-OUT.
            LocalTimeoutError: If the attempt budget runs out first.
        """
        logger.info("waiting_for_transcript_job", run_id=run_id)

        for attempt in range(1, self.config.max_poll_attempts + 1):
            await self.sleep(self.config.poll_interval_seconds)

            status = await self.check_status(run_id)
            if status is JobStatus.SUCCEEDED:
                logger.info("transcript_job_succeeded", run_id=run_id, attempts=attempt)
                return attempt

            logger.debug("transcript_job_pending", run_id=run_id, attempt=attempt)

        logger.error(
            "transcript_job_timed_out",
            run_id=run_id,
            attempts=self.config.max_poll_attempts,
        )
        raise LocalTimeoutError(self.config.max_poll_attempts, Stage.POLL)

    async def collect(self, run_id: str, video_url: str) -> TranscriptRecord:
        """Fetch the run's dataset and build the record from its first item."""
        payload = await request_json(
            self.client,
            "GET",
            f"{self._actor_url}/runs/{run_id}/dataset/items",
            params=self._auth,
            service=SERVICE_NAME,
            stage=Stage.COLLECT,
        )
        if not isinstance(payload, list):
            raise ProtocolError("Expected a list of Apify dataset items", Stage.COLLECT)

        if not payload:
            logger.warning("transcript_unavailable", run_id=run_id)
            raise NoTranscriptError()

        item = parse_model(
            ApifyDatasetItem, payload[0], service=SERVICE_NAME, stage=Stage.COLLECT
        )
        if item.text is None:
            logger.warning("transcript_text_missing", run_id=run_id, title=item.title)
            raise NoTranscriptTextError()

        return TranscriptRecord(
            video_url=video_url,
            text=item.text,
            title=item.title,
            channel_name=item.channel_name,
        )
