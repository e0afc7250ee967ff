from __future__ import annotations

from typing import Any

import pytest

from core.trans.engines.trans_google import GoogleTranslation
from core.trans.interface import NOT_FOUND_ERROR_CODE, RESPONSE_FORMAT_ERROR_CODE, TransInterface, TranslationError
from handlers.async_comm import AsyncCommError
from models.language_models import Language, Text

GOOGLE_HOST = "https://translation.googleapis.com/language/translate/v2"


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


def _engine(http: DummyHttp) -> GoogleTranslation:
    engine = GoogleTranslation("google-key", GOOGLE_HOST)
    engine._http = http  # type: ignore[assignment]
    return engine


def test_registered_under_google() -> None:
    assert TransInterface.registered["google"] is GoogleTranslation


@pytest.mark.asyncio
async def test_translation_with_source_language() -> None:
    http = DummyHttp(response={"data": {"translations": [{"translatedText": "hond"}]}})
    engine = _engine(http)

    result: list[Text] = await engine.translation(Text("dog", Language.EN), Language.NL)

    assert result == [Text("hond", Language.NL)]
    url, params = http.calls[0]
    assert url == GOOGLE_HOST
    assert params == {"key": "google-key", "q": "dog", "target": "nl", "format": "text", "source": "en"}


@pytest.mark.asyncio
async def test_translation_without_source_language_lets_service_detect() -> None:
    http = DummyHttp(
        response={"data": {"translations": [{"translatedText": "hond", "detectedSourceLanguage": "en"}]}}
    )
    engine = _engine(http)

    result: list[Text] = await engine.translation(Text("dog"), Language.NL)

    assert [str(text) for text in result] == ["hond"]
    assert result[0].language is Language.NL
    assert "source" not in http.calls[0][1]


@pytest.mark.asyncio
async def test_translation_returns_every_candidate() -> None:
    http = DummyHttp(
        response={"data": {"translations": [{"translatedText": "hond"}, {"translatedText": "reu"}]}}
    )
    engine = _engine(http)

    result: list[Text] = await engine.translation(Text("dog", Language.EN), Language.NL)

    assert [text.content for text in result] == ["hond", "reu"]


@pytest.mark.asyncio
async def test_translation_reports_http_status() -> None:
    engine = _engine(DummyHttp(error=AsyncCommError("HTTP 400 Bad Request", status=400)))

    with pytest.raises(TranslationError) as exc_info:
        await engine.translation(Text("dog", Language.EN), Language.TEST)

    assert exc_info.value.code == 400


@pytest.mark.asyncio
async def test_translation_rejects_missing_data() -> None:
    engine = _engine(DummyHttp(response={"error": "nope"}))

    with pytest.raises(TranslationError) as exc_info:
        await engine.translation(Text("dog", Language.EN), Language.NL)

    assert exc_info.value.code == RESPONSE_FORMAT_ERROR_CODE


@pytest.mark.asyncio
async def test_detect_language_returns_candidates_in_order() -> None:
    http = DummyHttp(
        response={
            "data": {
                "detections": [
                    [
                        {"language": "de", "confidence": 0.9, "isReliable": False},
                        {"language": "nl", "confidence": 0.1, "isReliable": False},
                    ]
                ]
            }
        }
    )
    engine = _engine(http)

    result: list[Language] = await engine.detect_language("Guten Morgen")

    assert result == [Language.DE, Language.NL]
    assert http.calls[0] == (GOOGLE_HOST + "/detect", {"key": "google-key", "q": "Guten Morgen"})


@pytest.mark.asyncio
async def test_detect_language_accepts_regional_codes() -> None:
    engine = _engine(DummyHttp(response={"data": {"detections": [[{"language": "zh-TW"}]]}}))

    assert await engine.detect_language("你好") == [Language.ZH]


@pytest.mark.asyncio
async def test_detect_language_undetermined_is_not_found() -> None:
    engine = _engine(DummyHttp(response={"data": {"detections": [[{"language": "und", "confidence": 1}]]}}))

    with pytest.raises(TranslationError) as exc_info:
        await engine.detect_language(";)")

    assert exc_info.value.code == NOT_FOUND_ERROR_CODE


@pytest.mark.asyncio
async def test_detect_language_unknown_codes_only_is_not_found() -> None:
    engine = _engine(DummyHttp(response={"data": {"detections": [[{"language": "haw"}]]}}))

    with pytest.raises(TranslationError) as exc_info:
        await engine.detect_language("aloha")

    assert exc_info.value.code == NOT_FOUND_ERROR_CODE


@pytest.mark.asyncio
async def test_check_support_looks_for_source_in_target_list() -> None:
    http = DummyHttp(response={"data": {"languages": [{"language": "en"}, {"language": "ru"}, {"language": "zh-CN"}]}})
    engine = _engine(http)

    assert await engine.check_support(Language.EN, Language.RU) is True
    assert await engine.check_support(Language.AA, Language.RU) is False
    assert http.calls[0] == (GOOGLE_HOST + "/languages", {"key": "google-key", "target": "ru"})


@pytest.mark.asyncio
async def test_detect_language_maps_withdrawn_codes() -> None:
    engine = _engine(DummyHttp(response={"data": {"detections": [[{"language": "iw"}, {"language": "jw"}]]}}))

    assert await engine.detect_language("שלום") == [Language.HE, Language.JV]


@pytest.mark.asyncio
async def test_check_support_matches_withdrawn_and_regional_codes() -> None:
    http = DummyHttp(response={"data": {"languages": [{"language": "iw"}, {"language": "zh-CN"}, {"language": "haw"}]}})
    engine = _engine(http)

    assert await engine.check_support(Language.HE, Language.EN) is True
    assert await engine.check_support(Language.ZH, Language.EN) is True
    assert await engine.check_support(Language.JV, Language.EN) is False


@pytest.mark.asyncio
async def test_check_support_reports_invalid_target() -> None:
    engine = _engine(DummyHttp(error=AsyncCommError("HTTP 400 Bad Request", status=400)))

    with pytest.raises(TranslationError) as exc_info:
        await engine.check_support(Language.EN, Language.TEST)

    assert exc_info.value.code == 400
