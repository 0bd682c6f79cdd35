"""
Browser speech recognition hosted in a web view.

The page runs the Web Speech API for one language and posts each final
transcript back to the host. Error events are posted as "ERROR:<reason>".
"""

import json
import logging
from typing import List, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)

ERROR_PREFIX = "ERROR:"


class Language(BaseModel):
    label: str
    code: str


LANGUAGES: List[Language] = [
    Language(label="English", code="en-IN"),
    Language(label="Hindi", code="hi-IN"),
    Language(label="Tamil", code="ta-IN"),
    Language(label="Malayalam", code="ml-IN"),
    Language(label="Telugu", code="te-IN"),
    Language(label="Kannada", code="kn-IN"),
    Language(label="Odia", code="or-IN"),
    Language(label="Sanskrit", code="sa-IN"),
    Language(label="Gujarati", code="gu-IN"),
    Language(label="Bengali", code="bn-IN"),
]

DEFAULT_LANGUAGE = LANGUAGES[0]


def find_language(code: Optional[str]) -> Optional[Language]:
    for lang in LANGUAGES:
        if lang.code == code:
            return lang
    return None


class VoiceMessage(BaseModel):
    """A decoded message from the speech page."""
    transcript: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


def parse_voice_message(raw: str) -> VoiceMessage:
    if raw.startswith(ERROR_PREFIX):
        return VoiceMessage(error=raw)
    return VoiceMessage(transcript=raw.strip())


_SPEECH_PAGE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body>
  <button id="startBtn" style="display:none;">Start</button>
  <script>
    function post(msg) {
      if (window.ReactNativeWebView) { window.ReactNativeWebView.postMessage(msg); }
      else if (window.parent && window.parent !== window) { window.parent.postMessage(msg, "*"); }
    }
    var Recognition = window.SpeechRecognition || window.webkitSpeechRecognition;
    if (!Recognition) {
      post("ERROR:not-supported");
    } else {
      var recognition = new Recognition();
      recognition.lang = __LANG__;
      recognition.interimResults = false;
      recognition.maxAlternatives = 1;
      recognition.onresult = function (event) {
        post(event.results[0][0].transcript);
      };
      recognition.onerror = function (event) {
        post("ERROR:" + event.error);
      };
      document.getElementById("startBtn").onclick = function () { recognition.start(); };
      recognition.start();
    }
  </script>
</body>
</html>
"""


def render_speech_page(lang_code: str) -> str:
    """
    Build the speech-recognition HTML for a recognition locale.

    Unknown codes fall back to English. The code is embedded as a JSON
    string literal, never spliced raw into the script.
    """
    lang = find_language(lang_code)
    if lang is None:
        logger.warning(f"Unknown speech language '{lang_code}', using {DEFAULT_LANGUAGE.code}")
        lang = DEFAULT_LANGUAGE
    literal = json.dumps(lang.code).replace("</", "<\\/")
    return _SPEECH_PAGE.replace("__LANG__", literal)
