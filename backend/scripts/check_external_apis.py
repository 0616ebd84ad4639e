#!/usr/bin/env python3
"""
Check if the safety lookup service is reachable and returns hazard data.
Run from backend: python scripts/check_external_apis.py
Exit 0 if a known ingredient resolves; 1 if the lookup fails or is not configured.
"""
import sys
from pathlib import Path
from typing import Tuple

# Add backend to path when run as script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# Short timeout for health check
HEALTH_TIMEOUT = 8
PROBE_INGREDIENT = "glycerin"


def check_safety_lookup() -> Tuple[bool, str]:
    """Return (success, message)."""
    from safety_core.config import get_safety_lookup_url, get_safety_lookup_enabled
    if not get_safety_lookup_enabled():
        return False, "disabled (SAFETY_LOOKUP_ENABLED=false)"
    if not get_safety_lookup_url():
        return False, "no lookup URL (set SAFETY_LOOKUP_URL or SUPABASE_URL)"
    from safety_core.external_apis.safety_lookup import resolve_safety_data
    res = resolve_safety_data(PROBE_INGREDIENT, timeout=HEALTH_TIMEOUT)
    if res is not None:
        return True, f"ok (score={res.score})"
    return False, "no result"


def main() -> int:
    print("Checking safety lookup service...")
    ok, msg = check_safety_lookup()
    print(f"  Safety lookup: {'OK' if ok else 'FAIL'} - {msg}")
    if ok:
        print("Safety lookup is working.")
        return 0
    print("Safety lookup failed or is not configured; analyses will use fallback scores.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
