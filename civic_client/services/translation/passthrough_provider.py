from .base import TranslationProvider, TARGET_LANGUAGE


class PassthroughProvider(TranslationProvider):
    """Returns the text unchanged. Used when translation is disabled."""

    name = "passthrough"

    def translate(self, text: str, source: str, target: str = TARGET_LANGUAGE) -> str:
        return text
