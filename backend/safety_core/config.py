"""
Centralized configuration for the safety lookup service and the analysis pipeline.
All values are read lazily from the environment so tests can patch them.
"""
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# backend/safety_core/config.py -> parent=safety_core, parent.parent=backend
_BACKEND_DIR = Path(__file__).resolve().parent.parent

_EDGE_FUNCTION_PATH = "/functions/v1/ewg-search"


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("CONFIG invalid integer %s=%r, using default %s", name, raw, default)
        return default


def get_env_path() -> Path:
    return _BACKEND_DIR / ".env"


# --- Safety lookup service ---
def get_safety_lookup_url() -> str:
    """Explicit SAFETY_LOOKUP_URL, else the ewg-search edge function under SUPABASE_URL."""
    url = os.environ.get("SAFETY_LOOKUP_URL", "").strip()
    if url:
        return url
    base = os.environ.get("SUPABASE_URL", "").strip().rstrip("/")
    return f"{base}{_EDGE_FUNCTION_PATH}" if base else ""

def get_safety_lookup_api_key() -> str:
    key = os.environ.get("SAFETY_LOOKUP_API_KEY", "").strip()
    return key or os.environ.get("SUPABASE_ANON_KEY", "").strip()

def get_safety_lookup_enabled() -> bool:
    return _env_flag("SAFETY_LOOKUP_ENABLED", "true")

def get_safety_lookup_timeout() -> int:
    return max(1, _env_int("SAFETY_LOOKUP_TIMEOUT", 10))

def get_safety_lookup_max_retries() -> int:
    return max(1, _env_int("SAFETY_LOOKUP_MAX_RETRIES", 2))

# Cap on concurrent lookups per analysis run
def get_lookup_concurrency() -> int:
    return max(1, _env_int("SAFETY_LOOKUP_CONCURRENCY", 4))


# --- Startup logging ---
def log_config() -> None:
    url = get_safety_lookup_url()
    logger.info(
        "CONFIG: lookup_enabled=%s lookup_url_set=%s api_key_set=%s timeout=%ds "
        "max_retries=%s concurrency=%s env_file=%s",
        get_safety_lookup_enabled(), bool(url), bool(get_safety_lookup_api_key()),
        get_safety_lookup_timeout(), get_safety_lookup_max_retries(),
        get_lookup_concurrency(), get_env_path().exists(),
    )
