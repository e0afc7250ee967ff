from __future__ import annotations

from models.response_models import (
    GoogleDetectResponse,
    GoogleLanguagesResponse,
    GoogleTranslateResponse,
    YandexLanguagesResponse,
    YandexResponse,
)


def test_google_translate_response_uses_camel_case_keys() -> None:
    response = GoogleTranslateResponse.from_dict(
        {"data": {"translations": [{"translatedText": "hond", "detectedSourceLanguage": "en"}]}}
    )

    translation = response.data.translations[0]
    assert translation.translated_text == "hond"
    assert translation.detected_source_language == "en"


def test_google_detect_response_keeps_groups() -> None:
    response = GoogleDetectResponse.from_dict(
        {"data": {"detections": [[{"language": "de", "isReliable": False, "confidence": 0.75}]]}}
    )

    detection = response.data.detections[0][0]
    assert detection.language == "de"
    assert detection.is_reliable is False
    assert detection.confidence == 0.75


def test_google_languages_response_name_is_optional() -> None:
    response = GoogleLanguagesResponse.from_dict({"data": {"languages": [{"language": "en"}]}})

    assert response.data.languages[0].language == "en"
    assert response.data.languages[0].name is None


def test_yandex_detect_response_has_no_text() -> None:
    response = YandexResponse.from_dict({"code": 200, "lang": "de"})

    assert response.code == 200
    assert response.lang == "de"
    assert response.text == []
    assert response.message is None


def test_yandex_error_response() -> None:
    response = YandexResponse.from_dict({"code": 401, "message": "API key is invalid"})

    assert response.code == 401
    assert response.lang == ""
    assert response.message == "API key is invalid"


def test_yandex_languages_response() -> None:
    response = YandexLanguagesResponse.from_dict({"dirs": ["en-ru"], "langs": {"en": "English"}})

    assert response.dirs == ["en-ru"]
    assert response.langs == {"en": "English"}
    assert response.code is None
