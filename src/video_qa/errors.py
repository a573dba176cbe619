"""Error taxonomy for the video Q&A pipeline.

Every error carries the pipeline stage it was raised from. Underlying causes
(httpx transport errors, pydantic validation errors) are chained with
``raise ... from exc`` instead of being folded into the message.
"""

from enum import StrEnum


class Stage(StrEnum):
    """Pipeline stage an error originated from."""

    CONFIG = "config"
    RESOLVE = "resolve"
    SUBMIT = "submit"
    POLL = "poll"
    COLLECT = "collect"
    UPLOAD = "upload"
    GENERATE = "generate"


class VideoQAError(Exception):
    """Base class for all pipeline failures."""

    def __init__(self, message: str, stage: Stage):
        self.message = message
        self.stage = stage
        super().__init__(f"[{stage}] {message}")


class ConfigurationError(VideoQAError):
    """Required settings (API credentials) are missing."""

    def __init__(self, message: str):
        super().__init__(message, Stage.CONFIG)


class NoIdentifierFoundError(VideoQAError):
    """No video identifier could be extracted from a URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Could not extract video ID from URL: {url}", Stage.RESOLVE)


class NetworkError(VideoQAError):
    """The request never produced an HTTP response."""


class RemoteRequestError(VideoQAError):
    """A service answered with a non-success HTTP status."""

    def __init__(self, service: str, status_code: int, body: str, stage: Stage):
        self.service = service
        self.status_code = status_code
        self.body = body
        super().__init__(f"{service} request failed with status {status_code}: {body}", stage)


class ProtocolError(VideoQAError):
    """A response was not valid JSON or lacked required fields."""


class DomainError(VideoQAError):
    """The services worked but the result is unusable."""


class NoTranscriptError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            "No transcript found for the video. The video might not have captions.",
            Stage.COLLECT,
        )


class NoTranscriptTextError(DomainError):
    def __init__(self) -> None:
        super().__init__("No transcript text found in the video data", Stage.COLLECT)


class JobFailedError(DomainError):
    """The job service reported a terminal failure status for the run."""

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Transcript job failed with status: {status}", Stage.POLL)


class UploadProcessingError(DomainError):
    """The ingestion service reported that the uploaded file failed processing."""

    def __init__(self, state: str):
        self.state = state
        super().__init__(f"Uploaded transcript entered state: {state}", Stage.UPLOAD)


class NoAnswerError(DomainError):
    def __init__(self) -> None:
        super().__init__("No answer generated", Stage.GENERATE)


class LocalTimeoutError(VideoQAError):
    """The local polling budget ran out before a terminal state was reached."""

    def __init__(self, attempts: int, stage: Stage):
        self.attempts = attempts
        super().__init__(f"Timed out after {attempts} attempts", stage)
