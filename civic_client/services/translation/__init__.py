"""
Pluggable machine translation for the voice report flow.
Falls back to the original text and never blocks submission on failure.
"""

from civic_client.services.translation.base import TranslationProvider, base_language
from civic_client.services.translation.libre_provider import LibreTranslateProvider
from civic_client.services.translation.passthrough_provider import PassthroughProvider
from civic_client.services.translation.resolver import get_translation_provider, translate_to_english

__all__ = [
    "TranslationProvider",
    "LibreTranslateProvider",
    "PassthroughProvider",
    "base_language",
    "get_translation_provider",
    "translate_to_english",
]
