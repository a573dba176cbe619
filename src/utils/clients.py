"""Client initialization utilities.

Provides the shared HTTP client used to talk to the transcript job service
and the Gemini API.
"""

import httpx


def get_http_client(
    timeout_seconds: float, transport: httpx.AsyncBaseTransport | None = None
) -> httpx.AsyncClient:
    """Create the AsyncClient shared by every call of one pipeline run.

    Args:
        timeout_seconds: Request timeout. Remote processing can be slow, so
            this is generous (300s by default).
        transport: Optional transport override, used by tests to plug in
            ``httpx.MockTransport``.

    Returns:
        Configured httpx AsyncClient. The caller owns it and must close it.

    Examples:
        >>> client = get_http_client(300)
        >>> # ... use client ...
        >>> await client.aclose()
    """
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds), transport=transport)
