"""In-process cache of artifact references keyed by video identifier."""

from src.utils.logging import get_logger

from .schemas import ArtifactReference

logger = get_logger(__name__)


class ArtifactCache:
    """Maps resolved video identifiers to uploaded transcript references.

    The pipeline consults this before re-indexing a video for a question. It
    lives only as long as the process; entries never expire on their own, so
    callers invalidate them when the remote file is known to be gone.
    """

    def __init__(self) -> None:
        self._entries: dict[str, ArtifactReference] = {}

    def get(self, video_id: str) -> ArtifactReference | None:
        artifact_ref = self._entries.get(video_id)
        logger.debug("artifact_cache_lookup", video_id=video_id, hit=artifact_ref is not None)
        return artifact_ref

    def put(self, video_id: str, artifact_ref: ArtifactReference) -> None:
        self._entries[video_id] = artifact_ref

    def invalidate(self, video_id: str) -> bool:
        """Drop one entry. Returns True if it was present."""
        return self._entries.pop(video_id, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, video_id: object) -> bool:
        return video_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
