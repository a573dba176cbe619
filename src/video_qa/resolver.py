"""Video identifier extraction from YouTube URLs."""

import re

from .errors import NoIdentifierFoundError

# Checked in order; the first pattern that matches wins.
VIDEO_ID_PATTERNS = (
    re.compile(r"[?&]v=([^&]+)"),
    re.compile(r"youtu\.be/([^?]+)"),
)


def resolve_video_id(url: str) -> str:
    """Extract the video identifier from a YouTube URL.

    Supports the ``watch?v=<id>`` query form (``v`` must be a whole query
    parameter name; the value ends at ``&`` or the end of the string) and the
    ``youtu.be/<id>`` short form (terminated by ``?`` or the end of the string).

    Args:
        url: Video URL.

    Returns:
        The non-empty video identifier.

    Raises:
        NoIdentifierFoundError: If neither URL shape is present.

    Examples:
        >>> resolve_video_id("https://www.youtube.com/watch?v=abc123&t=5")
        'abc123'
        >>> resolve_video_id("https://youtu.be/abc123?t=5")
        'abc123'
    """
    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)

    raise NoIdentifierFoundError(url)
