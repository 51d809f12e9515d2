"""
HTTP fetching for lyric lookups.

This module intentionally contains only network logic:
- requests
- retries
- backoff

No parsing. No site-specific semantics.
"""

from typing import Optional

import requests  # type: ignore[import-untyped]

from ..config import FETCH_RETRIES, FETCH_TIMEOUT
from ..utils.retry import retry_request

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/143.0.0.0 Safari/537.36",
    "Accept": "*/*",
}


def is_transient(exc: Exception) -> bool:
    """Connection problems, timeouts, 429 and 5xx responses are worth retrying."""
    if isinstance(exc, requests.HTTPError):
        response = exc.response
        if response is None:
            return False
        return response.status_code == 429 or response.status_code >= 500
    return isinstance(exc, requests.RequestException)


def _get_text(url: str, headers: dict, timeout: float, session) -> str:
    resp = session.get(url, headers=headers, timeout=timeout)
    resp.raise_for_status()
    return resp.text


def fetch_text(
    url: str,
    *,
    headers: Optional[dict] = None,
    timeout: float = FETCH_TIMEOUT,
    max_retries: int = FETCH_RETRIES,
    session: Optional[requests.Session] = None,
) -> str:
    """
    GET ``url`` and return the response body.

    Raises:
        requests.RequestException: a permanent failure at once, or the last
            transient one once retries run out
    """
    return retry_request(
        _get_text,
        url,
        headers or DEFAULT_HEADERS,
        timeout,
        session or requests,
        max_retries=max_retries,
        exceptions=(requests.RequestException,),
        retry_if=is_transient,
    )
