"""Central configuration for the adventure runtime.

Every tunable has a sensible default and can be overridden through
environment variables (prefix ``ADV_``).
"""
from __future__ import annotations
import os

def _get_int_env(name: str, default: int, minval: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = int(raw)
        if minval is not None and v < minval:
            return default
        return v
    except ValueError:
        return default


def _get_float_env(name: str, default: float, minval: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = float(raw)
        if minval is not None and v < minval:
            return default
        return v
    except ValueError:
        return default


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    return val in {"1", "true", "yes", "on"}


__all__ = [
    # Script engine
    "get_debug_mode", "get_max_event_depth",
    # Speech
    "get_tts_enabled", "get_tts_base_url", "get_tts_timeout",
    # Bootstrap
    "get_world_file",
]


# ---------------- Script engine ----------------

def get_debug_mode() -> bool:
    """Publish ``[Debug]`` system messages from the engines. Var: ADV_DEBUG (default False)."""
    return _get_bool_env("ADV_DEBUG", False)


def get_max_event_depth() -> int:
    """Max nesting of events raised by actions (lock door -> OnDoorLock ...). Var: ADV_MAX_EVENT_DEPTH (default 8)."""
    return _get_int_env("ADV_MAX_EVENT_DEPTH", 8, minval=1)


# ---------------- Speech (TTS for NPC dialogue) ----------------

def get_tts_enabled() -> bool:
    """Enable speech synthesis for NPC lines (default: False). Var: ADV_TTS_ENABLED."""
    return _get_bool_env("ADV_TTS_ENABLED", False)


def get_tts_base_url() -> str:
    """Base URL of the TTS server. Var: ADV_TTS_BASE_URL (default http://localhost:5002)."""
    return os.getenv("ADV_TTS_BASE_URL", "http://localhost:5002").strip().rstrip("/")


def get_tts_timeout() -> float:
    """HTTP timeout in seconds. Var: ADV_TTS_TIMEOUT (default 10.0)."""
    return _get_float_env("ADV_TTS_TIMEOUT", 10.0, minval=0.5)


# ---------------- Bootstrap ----------------

def get_world_file() -> str | None:
    """Optional override of the world JSON path. Var: ADV_WORLD_FILE."""
    raw = os.getenv("ADV_WORLD_FILE")
    if raw is None or not raw.strip():
        return None
    return raw.strip()
