"""Shared HTTP client utilities: reusable httpx client."""

import logging

import httpx

logger = logging.getLogger(__name__)

# Module-level shared client (created lazily, lives for the process lifetime)
_client: httpx.AsyncClient | None = None

REQUEST_TIMEOUT = 15.0


def get_shared_client() -> httpx.AsyncClient:
    """Return a shared httpx.AsyncClient, creating it on first call."""
    global _client
    if _client is None or _client.is_closed:
        _client = httpx.AsyncClient(timeout=REQUEST_TIMEOUT, follow_redirects=True)
    return _client


async def close_shared_client() -> None:
    """Close the shared client if one was created."""
    global _client
    if _client is not None and not _client.is_closed:
        await _client.aclose()
    _client = None


async def fetch_text(url: str, *, context: str = "") -> str | None:
    """GET *url* and return the response body as text.

    Returns None on any network error or non-200 response so callers can apply
    their own fallback. Single attempt, no retries.
    """
    client = get_shared_client()
    try:
        resp = await client.get(
            url, headers={"Accept": "text/markdown, text/plain, */*"}
        )
        if resp.status_code != 200:
            logger.warning(
                "HTTP %d for %s%s",
                resp.status_code,
                url,
                f" ({context})" if context else "",
            )
            return None
        return resp.text
    except httpx.HTTPError:
        logger.warning(
            "HTTP error fetching %s%s",
            url,
            f" ({context})" if context else "",
            exc_info=True,
        )
        return None
