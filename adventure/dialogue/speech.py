"""Speech synthesis for NPC dialogue lines.

Talks to a local TTS HTTP server (``GET /api/tts?text=...`` returning audio
bytes). Disabled by default; when the server is down every call simply
returns ``None`` and dialogue continues as text only.
"""

from __future__ import annotations
import logging
from typing import Dict, Optional

import requests

from config import get_tts_base_url, get_tts_enabled, get_tts_timeout

logger = logging.getLogger(__name__)


class SpeechClient:
    """Simple TTS HTTP client with an in-memory cache keyed by text."""

    def __init__(self, base_url: str, timeout: float):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.available = False
        self._cache: Dict[str, bytes] = {}
        self._check_availability()

    def _check_availability(self):
        """Check if the TTS server answers at all."""
        try:
            response = requests.get(self.base_url, timeout=min(2, self.timeout))
            self.available = response.status_code < 500
        except requests.RequestException:
            self.available = False

    def synthesize(self, text: str) -> Optional[bytes]:
        """Return audio bytes for ``text`` or ``None``."""
        if not self.available or not text:
            return None
        cached = self._cache.get(text)
        if cached is not None:
            return cached
        try:
            response = requests.get(
                f"{self.base_url}/api/tts",
                params={"text": text},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("TTS request failed: %s", e)
            return None
        if response.status_code != 200 or not response.content:
            logger.warning("TTS server answered %s", response.status_code)
            return None
        self._cache[text] = response.content
        return response.content

    def clear_cache(self):
        self._cache.clear()


def create_speech_client() -> Optional[SpeechClient]:
    """Build a client from config, ``None`` when speech is disabled."""
    if not get_tts_enabled():
        return None
    client = SpeechClient(get_tts_base_url(), get_tts_timeout())
    if not client.available:
        logger.info("TTS server at %s not reachable, dialogue will be text only", client.base_url)
    return client
