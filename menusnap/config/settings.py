"""Runtime configuration for the results view service."""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _int_setting(name: str, default: int, *, minimum: int = 0) -> int:
    raw_value = os.getenv(name)
    if raw_value is None or not raw_value.strip():
        return default
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer (got {raw_value!r}).") from exc
    if value < minimum:
        raise RuntimeError(f"{name} must be >= {minimum}.")
    return value


DEFAULT_LANGUAGE = os.getenv("MENUSNAP_DEFAULT_LANGUAGE", "zh").strip().lower()
APPETIZER_COUNT = _int_setting("MENUSNAP_APPETIZER_COUNT", 2)
SCAN_URL = os.getenv("MENUSNAP_SCAN_URL", "/")
CAPTURE_URL = os.getenv("MENUSNAP_CAPTURE_URL", "/scan")
MAX_SESSIONS = _int_setting("MENUSNAP_MAX_SESSIONS", 500, minimum=1)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


__all__ = [
    "APPETIZER_COUNT",
    "CAPTURE_URL",
    "DEFAULT_LANGUAGE",
    "LOG_LEVEL",
    "MAX_SESSIONS",
    "SCAN_URL",
]
