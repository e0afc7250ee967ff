from __future__ import annotations

from typing import Any

import pytest

from core.trans.engines.trans_yandex import YandexTranslation
from core.trans.interface import NOT_FOUND_ERROR_CODE, TransInterface, TranslationError
from handlers.async_comm import AsyncCommError
from models.language_models import Language, Text

YANDEX_HOST = "https://translate.yandex.net/api/v1.5/tr.json/"


class DummyHttp:
    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self.response: Any = response
        self.error: Exception | None = error
        self.calls: list[tuple[str, dict[str, str]]] = []

    async def post(self, *, url: str, params: dict[str, str] | None = None, data: Any | None = None) -> Any:
        _ = data
        self.calls.append((url, dict(params or {})))
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self) -> None:
        pass


def _engine(http: DummyHttp) -> YandexTranslation:
    engine = YandexTranslation("yandex-key", YANDEX_HOST)
    engine._http = http  # type: ignore[assignment]
    return engine


def test_registered_under_yandex() -> None:
    assert TransInterface.registered["yandex"] is YandexTranslation


@pytest.mark.asyncio
async def test_translation_requests_direction() -> None:
    http = DummyHttp(response={"code": 200, "lang": "en-nl", "text": ["hond"]})
    engine = _engine(http)

    result: list[Text] = await engine.translation(Text("dog", Language.EN), Language.NL)

    assert result == [Text("hond", Language.NL)]
    assert http.calls == [(YANDEX_HOST + "translate", {"key": "yandex-key", "text": "dog", "lang": "en-nl"})]


@pytest.mark.asyncio
async def test_translation_without_source_sends_target_only() -> None:
    http = DummyHttp(response={"code": 200, "lang": "en-nl", "text": ["hond"]})
    engine = _engine(http)

    await engine.translation(Text("dog"), Language.NL)

    assert http.calls[0][1]["lang"] == "nl"


@pytest.mark.asyncio
async def test_translation_body_code_is_reported() -> None:
    body: dict[str, Any] = {"code": 501, "message": "The specified translation direction is not supported"}
    engine = _engine(DummyHttp(response=body))

    with pytest.raises(TranslationError) as exc_info:
        await engine.translation(Text("dog", Language.EN), Language.TEST)

    assert exc_info.value.code == 501
    assert exc_info.value.message == "The specified translation direction is not supported"


@pytest.mark.asyncio
async def test_translation_http_status_is_reported() -> None:
    engine = _engine(DummyHttp(error=AsyncCommError("HTTP 401 Unauthorized", status=401)))

    with pytest.raises(TranslationError) as exc_info:
        await engine.translation(Text("dog", Language.EN), Language.NL)

    assert exc_info.value.code == 401


@pytest.mark.asyncio
async def test_detect_language_returns_single_language() -> None:
    http = DummyHttp(response={"code": 200, "lang": "de"})
    engine = _engine(http)

    result: list[Language] = await engine.detect_language("Guten Morgen")

    assert result == [Language.DE]
    assert http.calls[0] == (YANDEX_HOST + "detect", {"key": "yandex-key", "text": "Guten Morgen"})


@pytest.mark.asyncio
@pytest.mark.parametrize("lang", ["", "xx"])
async def test_detect_language_without_known_language_is_not_found(lang: str) -> None:
    engine = _engine(DummyHttp(response={"code": 200, "lang": lang}))

    with pytest.raises(TranslationError) as exc_info:
        await engine.detect_language(";)")

    assert exc_info.value.code == NOT_FOUND_ERROR_CODE


@pytest.mark.asyncio
async def test_check_support_matches_direction() -> None:
    http = DummyHttp(response={"dirs": ["en-ru", "ru-en", "en-nl"], "langs": {"en": "English", "ru": "Russian"}})
    engine = _engine(http)

    assert await engine.check_support(Language.EN, Language.RU) is True
    assert await engine.check_support(Language.EN, Language.TEST) is False
    assert http.calls[0] == (YANDEX_HOST + "getLangs", {"key": "yandex-key", "ui": "en"})


@pytest.mark.asyncio
async def test_check_support_reports_error_code_in_body() -> None:
    engine = _engine(DummyHttp(response={"code": 401, "message": "API key is invalid"}))

    with pytest.raises(TranslationError) as exc_info:
        await engine.check_support(Language.EN, Language.RU)

    assert exc_info.value.code == 401
