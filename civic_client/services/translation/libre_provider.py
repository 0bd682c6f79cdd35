import logging
from typing import Any, Dict, Optional

import requests

from .base import TranslationProvider, TARGET_LANGUAGE, base_language

logger = logging.getLogger(__name__)


class LibreTranslateProvider(TranslationProvider):
    """
    LibreTranslate provider (free, open source, self-hostable).

    - API key optional; public instances may require one.
    - Uses a strict timeout.
    - Raises on failure so the caller can decide the fallback.
    """

    name = "libre"

    def __init__(self, base_url: str, api_key: Optional[str] = None, timeout: float = 5.0,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def translate(self, text: str, source: str, target: str = TARGET_LANGUAGE) -> str:
        src = base_language(source)
        tgt = base_language(target)
        if src == tgt:
            return text

        payload: Dict[str, Any] = {
            "q": text,
            "source": src,
            "target": tgt,
            "format": "text",
        }
        if self.api_key:
            payload["api_key"] = self.api_key

        resp = self.session.post(f"{self.base_url}/translate", json=payload, timeout=self.timeout)
        if resp.status_code != 200:
            raise RuntimeError(f"LibreTranslate failed with status {resp.status_code}")

        data: Dict[str, Any] = resp.json()
        translated = data.get("translatedText")
        if not isinstance(translated, str):
            raise RuntimeError("LibreTranslate response has no translatedText")
        return translated
