"""
HTTP GET with retries and exponential backoff for the safety lookup service.
Retry policy lives here, at the transport boundary, not in the resolver.
"""
import logging
import time
from typing import Callable, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_BACKOFF = 1.0


def get_with_retries(
    url: str,
    params: Optional[dict] = None,
    headers: Optional[dict] = None,
    timeout: int = 10,
    max_retries: int = DEFAULT_MAX_RETRIES,
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF,
    should_continue: Optional[Callable[[], bool]] = None,
) -> Tuple[Optional[requests.Response], Optional[str]]:
    """
    GET with retries and exponential backoff on timeout/connection errors and 5xx responses.
    Returns (response, None) on success or on a non-retryable status,
    (None, error_message) when every attempt failed.
    should_continue is checked before each attempt; False stops without a request.
    """
    params = params or {}
    last_error: Optional[str] = None
    for attempt in range(max_retries):
        if should_continue is not None and not should_continue():
            return (None, "aborted")
        try:
            resp = requests.get(url, params=params, headers=headers, timeout=timeout)
            if resp.status_code < 500:
                return (resp, None)
            last_error = f"HTTP {resp.status_code}"
        except requests.Timeout as e:
            last_error = f"Read timed out: {e}"
        except requests.RequestException as e:
            last_error = f"{type(e).__name__}: {e}"
        logger.warning(
            "EXTERNAL_API retry attempt=%s/%s url=%s error=%s",
            attempt + 1, max_retries, url[:60], last_error,
        )
        if attempt < max_retries - 1:
            delay = initial_backoff * (2 ** attempt)
            logger.info("EXTERNAL_API backoff %.1fs before retry", delay)
            time.sleep(delay)
    return (None, last_error)
