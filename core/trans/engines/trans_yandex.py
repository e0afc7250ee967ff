"""Yandex.Translate API (v1.5) backend.

Docs: https://tech.yandex.com/translate/doc/dg/concepts/api-overview-docpage/
Terms: https://yandex.com/legal/offer_translate_api/index.html

``translate`` and ``detect`` answer with a flat ``{code, lang, text}`` object.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from core.trans.engines.http_engine import HttpEngine
from core.trans.interface import NOT_FOUND_ERROR_CODE, TranslationError
from models.language_models import Language, Text
from models.response_models import YandexLanguagesResponse, YandexResponse
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

__all__: list[str] = ["YandexTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

OK_RESPONSE: Final[int] = 200


class YandexTranslation(HttpEngine):
    """Translator for the Yandex.Translate service."""

    @staticmethod
    def fetch_engine_name() -> str:
        return "yandex"

    async def translation(self, source: Text, tgt_lang: Language) -> list[Text]:
        # "en-nl" requests a direction, a bare "nl" lets the service detect the source
        direction: str = source.language.concat(tgt_lang) if source.language is not None else str(tgt_lang)
        logger.debug("'content': '%s', 'lang': '%s'", source, direction)

        body = await self._post("translate", {"text": source.content, "lang": direction})
        response: YandexResponse = self._checked(self._decode(YandexResponse.from_dict, body))

        logger.info("translation completed (%s)", response.lang or direction)
        return [Text(text, tgt_lang) for text in response.text]

    async def detect_language(self, content: str) -> list[Language]:
        body = await self._post("detect", {"text": content})
        response: YandexResponse = self._checked(self._decode(YandexResponse.from_dict, body))

        try:
            language: Language = Language.from_code(response.lang)
        except ValueError:
            msg: str = f"No known language detected for '{content}' (lang='{response.lang}')"
            raise TranslationError(NOT_FOUND_ERROR_CODE, msg) from None
        logger.debug("Detected language: %s", language)
        return [language]

    async def check_support(self, src_lang: Language, tgt_lang: Language) -> bool:
        body = await self._post("getLangs", {"ui": str(src_lang)})
        response: YandexLanguagesResponse = self._decode(YandexLanguagesResponse.from_dict, body)
        if response.code is not None and response.code != OK_RESPONSE:
            raise TranslationError(response.code, response.message)
        return src_lang.concat(tgt_lang) in response.dirs

    def _checked(self, response: YandexResponse) -> YandexResponse:
        if response.code != OK_RESPONSE:
            raise TranslationError(response.code, response.message)
        return response
