import logging
from typing import Optional

from civic_client.core.settings import settings
from .base import TranslationProvider, TARGET_LANGUAGE
from .libre_provider import LibreTranslateProvider
from .passthrough_provider import PassthroughProvider

logger = logging.getLogger(__name__)

_provider_instance: Optional[TranslationProvider] = None


def get_translation_provider() -> TranslationProvider:
    """
    Resolve the active translation provider based on settings.

    Rules:
    - TRANSLATION_ENABLED=false -> passthrough.
    - TRANSLATION_PROVIDER='libre' (default) -> LibreTranslate at LIBRETRANSLATE_URL.
    - Anything else -> passthrough.
    """
    global _provider_instance
    if _provider_instance is not None:
        return _provider_instance

    provider_name = (getattr(settings, "TRANSLATION_PROVIDER", "libre") or "libre").lower()

    if settings.TRANSLATION_ENABLED and provider_name == "libre":
        _provider_instance = LibreTranslateProvider(
            base_url=settings.LIBRETRANSLATE_URL,
            api_key=settings.LIBRETRANSLATE_API_KEY,
            timeout=settings.TRANSLATION_TIMEOUT_SECONDS,
        )
        logger.info("Translation provider initialized: libre")
        return _provider_instance

    if provider_name not in ("libre", "passthrough"):
        logger.warning(f"Unknown TRANSLATION_PROVIDER '{provider_name}'. Falling back to passthrough.")
    _provider_instance = PassthroughProvider()
    logger.info("Translation provider initialized: passthrough")
    return _provider_instance


def translate_to_english(text: str, source: str, provider: Optional[TranslationProvider] = None) -> str:
    """
    Translate text to English, never raising.

    Blank input yields "". Any provider failure yields the original text
    unchanged so the report flow is never blocked on translation.
    """
    if not text or not text.strip():
        return ""
    provider = provider or get_translation_provider()
    try:
        return provider.translate(text, source, TARGET_LANGUAGE)
    except Exception as e:
        logger.warning(f"Translation via {provider.name} failed, passing text through: {e}")
        return text
