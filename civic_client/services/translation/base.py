from abc import ABC, abstractmethod
import logging

logger = logging.getLogger(__name__)

TARGET_LANGUAGE = "en"


def base_language(code: str) -> str:
    """'hi-IN' -> 'hi'. Speech-recognition locales carry a region suffix; translators don't."""
    return (code or TARGET_LANGUAGE).split("-", 1)[0].lower()


class TranslationProvider(ABC):
    """
    Abstract machine-translation provider.

    Contract:
    - Input: text and a source language code ("hi-IN" or "hi")
    - Output: the text translated to English
    - MAY raise on failure; callers fall back to the original text.
    """

    name = "base"

    @abstractmethod
    def translate(self, text: str, source: str, target: str = TARGET_LANGUAGE) -> str:
        raise NotImplementedError
