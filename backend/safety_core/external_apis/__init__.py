"""
Safety lookup connector for hazard scores (EWG Skin Deep via edge function).
"""
from .base import RunToken, SafetyResolver
from .http_retry import get_with_retries
from .safety_lookup import parse_search_markup, resolve_safety_data

__all__ = [
    "RunToken",
    "SafetyResolver",
    "get_with_retries",
    "parse_search_markup",
    "resolve_safety_data",
]
