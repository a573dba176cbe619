"""Pydantic schemas for the video Q&A pipeline.

Domain models (what the pipeline passes between stages) come first, followed by
the wire models for the Apify and Gemini REST APIs.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from .resolver import resolve_video_id

# Artifact references are opaque file URIs handed back by the ingestion service.
ArtifactReference = str


class VideoReference(BaseModel):
    """A video URL together with the identifier derived from it."""

    model_config = ConfigDict(frozen=True)

    url: str
    video_id: str

    @classmethod
    def from_url(cls, url: str) -> "VideoReference":
        return cls(url=url, video_id=resolve_video_id(url))


class JobStatus(StrEnum):
    """Local view of a transcript job's state.

    The job service reports a wider set of statuses; anything that is not
    terminal is treated as still pending.
    """

    PENDING = "PENDING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"

    @classmethod
    def from_service(cls, status: str) -> "JobStatus":
        if status == "SUCCEEDED":
            return cls.SUCCEEDED
        if status in ("FAILED", "ABORTED"):
            return cls.FAILED
        if status == "TIMED-OUT":
            return cls.TIMED_OUT
        return cls.PENDING


class TranscriptRecord(BaseModel):
    """Transcript text produced by one successful job, with optional metadata."""

    model_config = ConfigDict(frozen=True)

    video_url: str
    text: str
    title: str | None = None
    channel_name: str | None = None


class UploadedFile(BaseModel):
    """File handle returned by the ingestion service."""

    name: str | None = None
    uri: str
    state: str

    @property
    def is_active(self) -> bool:
        return self.state == "ACTIVE"


# ===== Apify wire models =====


class ApifyStartUrl(BaseModel):
    url: str


class ApifyRunInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_urls: list[ApifyStartUrl] = Field(alias="startUrls")
    max_results: int = Field(alias="maxResults")


class ApifyRun(BaseModel):
    """Run object returned by the start endpoint."""

    id: str


class ApifyRunStatus(BaseModel):
    """Status view of a run; the poll endpoint is only read for its status."""

    status: str


class ApifyDatasetItem(BaseModel):
    text: str | None = None
    channel_name: str | None = Field(default=None, alias="channelName")
    title: str | None = None


# ===== Gemini wire models =====


class GeminiFileResponse(BaseModel):
    file: UploadedFile


class GeminiFileDataRef(BaseModel):
    file_uri: str
    mime_type: str = "text/plain"


class GeminiPart(BaseModel):
    text: str | None = None
    file_data: GeminiFileDataRef | None = None


class GeminiContent(BaseModel):
    role: str = "user"
    parts: list[GeminiPart]


class GeminiGenerateRequest(BaseModel):
    contents: list[GeminiContent]


class GeminiResponsePart(BaseModel):
    text: str | None = None


class GeminiResponseContent(BaseModel):
    parts: list[GeminiResponsePart] = Field(default_factory=list)


class GeminiCandidate(BaseModel):
    content: GeminiResponseContent | None = None


class GeminiGenerateResponse(BaseModel):
    candidates: list[GeminiCandidate] | None = None

    def first_text(self) -> str | None:
        """Return the text of the first part of the first candidate, if any."""
        if not self.candidates:
            return None
        content = self.candidates[0].content
        if content is None or not content.parts:
            return None
        return content.parts[0].text or None
