"""
Split free-text ingredient lists into candidate names.
Deterministic split and trim only; duplicates are kept in their original order.
"""
import re
import logging
from typing import List, Optional

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[,;\n]+")
MIN_TOKEN_LENGTH = 2


def tokenize(raw_text: Optional[str]) -> List[str]:
    """
    Split on comma, semicolon and newline; trim, lower-case, and drop tokens
    shorter than two characters.

    "Water, water, Glycerin" -> ["water", "water", "glycerin"]
    """
    if not raw_text or not isinstance(raw_text, str):
        return []
    tokens = [part.strip() for part in _SEPARATORS.split(raw_text.lower())]
    out = [t for t in tokens if len(t) >= MIN_TOKEN_LENGTH]
    logger.debug("TOKENIZE raw_chars=%d tokens=%d", len(raw_text), len(out))
    return out


def format_display_name(token: str) -> str:
    """'sodium laureth sulfate' -> 'Sodium Laureth Sulfate'. Rest of each word is left as-is."""
    return " ".join(word[:1].upper() + word[1:] for word in token.split())
