"""Google Cloud Translation API Basic (v2) backend.

Docs: https://cloud.google.com/translate/docs/
Terms: https://cloud.google.com/translate/attribution

Every response nests its results under a ``data`` object.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from core.trans.engines.http_engine import HttpEngine
from core.trans.interface import NOT_FOUND_ERROR_CODE, TranslationError
from models.language_models import Language, Text
from models.response_models import GoogleDetectResponse, GoogleLanguagesResponse, GoogleTranslateResponse
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

__all__: list[str] = ["GoogleTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

# Google reports text it cannot attribute to a language as "und"
UNDETERMINED_LANGUAGE: Final[str] = "und"


class GoogleTranslation(HttpEngine):
    """Translator for the Google Translate service (API key authentication)."""

    @staticmethod
    def fetch_engine_name() -> str:
        return "google"

    async def translation(self, source: Text, tgt_lang: Language) -> list[Text]:
        logger.debug("'content': '%s', 'src_lang': '%s', 'tgt_lang': '%s'", source, source.language, tgt_lang)
        params: dict[str, str] = {"q": source.content, "target": str(tgt_lang), "format": "text"}
        if source.language is not None:
            params["source"] = str(source.language)

        body = await self._post("", params)
        response: GoogleTranslateResponse = self._decode(GoogleTranslateResponse.from_dict, body)

        results: list[Text] = [Text(item.translated_text, tgt_lang) for item in response.data.translations]
        logger.info("translation completed (%s > %s)", source.language or "auto", tgt_lang)
        return results

    async def detect_language(self, content: str) -> list[Language]:
        body = await self._post("/detect", {"q": content})
        response: GoogleDetectResponse = self._decode(GoogleDetectResponse.from_dict, body)

        languages: list[Language] = []
        for group in response.data.detections:
            for detection in group:
                if detection.language.lower() == UNDETERMINED_LANGUAGE:
                    msg: str = f"Language of '{content}' is undetermined"
                    raise TranslationError(NOT_FOUND_ERROR_CODE, msg)
                try:
                    languages.append(Language.from_code(detection.language))
                except ValueError:
                    logger.debug("Skipping unsupported language code '%s'", detection.language)

        if not languages:
            msg = f"No known language detected for '{content}'"
            raise TranslationError(NOT_FOUND_ERROR_CODE, msg)
        logger.debug("Detected languages: %s", languages)
        return languages

    async def check_support(self, src_lang: Language, tgt_lang: Language) -> bool:
        # The list holds every source language that can be translated into the target.
        body = await self._post("/languages", {"target": str(tgt_lang)})
        response: GoogleLanguagesResponse = self._decode(GoogleLanguagesResponse.from_dict, body)
        return any(_is_language(item.language, src_lang) for item in response.data.languages)


def _is_language(code: str, language: Language) -> bool:
    try:
        return Language.from_code(code) is language
    except ValueError:
        return False
