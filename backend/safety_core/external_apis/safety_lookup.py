"""
Safety lookup connector (EWG Skin Deep search via the ewg-search edge function).
GET <lookup url>?ingredient=<name> -> {"html": "<search page>"} or {"error": "..."}

Fail-open: every failure path returns None so the caller falls back to defaults.
"""
import logging
import re
from typing import Optional

import requests
from bs4 import BeautifulSoup

from safety_core.config import (
    get_safety_lookup_api_key,
    get_safety_lookup_enabled,
    get_safety_lookup_max_retries,
    get_safety_lookup_timeout,
    get_safety_lookup_url,
)
from safety_core.external_apis.base import RunToken
from safety_core.external_apis.http_retry import get_with_retries
from safety_core.models.ingredient import (
    DEFAULT_SCORE,
    MAX_SCORE,
    MIN_SCORE,
    AuthoritativeData,
)

logger = logging.getLogger(__name__)

RESULT_SELECTOR = ".product-listing"
SCORE_SELECTOR = ".product-hazard-score"
HAZARDS_SELECTOR = ".product-hazards li"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _parse_score(text: str) -> int:
    """Leading integer of the score text, clamped to [0, 10]; DEFAULT_SCORE when there is none."""
    m = _LEADING_INT.match(text or "")
    if not m:
        return DEFAULT_SCORE
    return min(MAX_SCORE, max(MIN_SCORE, int(m.group(1))))


def parse_search_markup(html: str) -> Optional[AuthoritativeData]:
    """Extract score and hazard phrases from the first result block, or None if there is none."""
    if not isinstance(html, str) or not html.strip():
        return None
    soup = BeautifulSoup(html, "html.parser")
    first = soup.select_one(RESULT_SELECTOR)
    if first is None:
        return None
    score_el = first.select_one(SCORE_SELECTOR)
    score = _parse_score(score_el.get_text() if score_el is not None else "")
    phrases = [li.get_text().strip() for li in first.select(HAZARDS_SELECTOR)]
    concerns = ", ".join(p for p in phrases if p)
    return AuthoritativeData(score=score, concerns=concerns)


def resolve_safety_data(
    name: str,
    token: Optional[RunToken] = None,
    timeout: Optional[int] = None,
) -> Optional[AuthoritativeData]:
    """
    One logical lookup for an ingredient name. Returns AuthoritativeData or None.
    Never raises; a cancelled token skips the request.
    """
    query = (name or "").strip()
    if not query:
        return None
    if not get_safety_lookup_enabled():
        logger.debug("SAFETY_LOOKUP disabled name=%s", query[:60])
        return None
    url = get_safety_lookup_url()
    if not url:
        logger.debug("SAFETY_LOOKUP no url configured name=%s", query[:60])
        return None
    if token is not None and token.cancelled:
        logger.debug("SAFETY_LOOKUP skipped stale run=%s name=%s", token.generation, query[:60])
        return None

    api_key = get_safety_lookup_api_key()
    headers = {"Authorization": f"Bearer {api_key}"} if api_key else None
    resp, err = get_with_retries(
        url,
        params={"ingredient": query},
        headers=headers,
        timeout=timeout or get_safety_lookup_timeout(),
        max_retries=get_safety_lookup_max_retries(),
        should_continue=token.is_current if token is not None else None,
    )
    if err is not None:
        logger.warning("SAFETY_LOOKUP fetch failed name=%s error=%s", query[:60], err)
        return None
    if not 200 <= resp.status_code < 300:
        logger.warning("SAFETY_LOOKUP bad status name=%s status=%s", query[:60], resp.status_code)
        return None
    try:
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("SAFETY_LOOKUP response error name=%s error=%s", query[:60], type(e).__name__)
        return None

    if not isinstance(data, dict):
        logger.warning("SAFETY_LOOKUP unexpected payload name=%s", query[:60])
        return None
    if data.get("error"):
        logger.warning("SAFETY_LOOKUP service error name=%s error=%s", query[:60], str(data["error"])[:80])
        return None

    html = data.get("html")
    if not isinstance(html, str) or not html.strip():
        logger.info("SAFETY_LOOKUP no results name=%s", query[:60])
        return None
    result = parse_search_markup(html)
    if result is None:
        logger.info("SAFETY_LOOKUP no results name=%s", query[:60])
        return None
    logger.info(
        "SAFETY_LOOKUP success name=%s score=%s concerns=%d",
        query[:60], result.score, len(result.concerns.split(", ")) if result.concerns else 0,
    )
    return result
