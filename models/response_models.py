"""Data models for the JSON bodies returned by the translation services.

Google Translate nests results under ``data``; Yandex.Translate returns a flat
object with ``code``, ``lang`` and ``text``. Each backend decodes its own
envelope with these models and never exposes them to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from dataclasses_json import DataClassJsonMixin, LetterCase, dataclass_json

__all__: list[str] = [
    "GoogleDetectResponse",
    "GoogleLanguagesResponse",
    "GoogleTranslateResponse",
    "YandexLanguagesResponse",
    "YandexResponse",
]


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class _GoogleTranslation(DataClassJsonMixin):
    translated_text: str
    detected_source_language: str | None = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class _GoogleDetection(DataClassJsonMixin):
    language: str
    confidence: float | None = None
    is_reliable: bool | None = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class _GoogleLanguage(DataClassJsonMixin):
    language: str
    name: str | None = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class _GoogleTranslateData(DataClassJsonMixin):
    translations: list[_GoogleTranslation]


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class _GoogleDetectData(DataClassJsonMixin):
    # One group per submitted string; only one string is ever submitted.
    detections: list[list[_GoogleDetection]]


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class _GoogleLanguagesData(DataClassJsonMixin):
    languages: list[_GoogleLanguage]


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class GoogleTranslateResponse(DataClassJsonMixin):
    """Body of ``POST /language/translate/v2``."""

    data: _GoogleTranslateData


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class GoogleDetectResponse(DataClassJsonMixin):
    """Body of ``POST /language/translate/v2/detect``."""

    data: _GoogleDetectData


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class GoogleLanguagesResponse(DataClassJsonMixin):
    """Body of ``POST /language/translate/v2/languages``."""

    data: _GoogleLanguagesData


@dataclass_json
@dataclass
class YandexResponse(DataClassJsonMixin):
    """Body of the Yandex ``translate`` and ``detect`` methods.

    Attributes:
        code (int): 200 on success, otherwise the service error code.
        lang (str): Translation direction (``"en-nl"``) or detected language; empty when undetermined.
        text (list[str]): Translations; absent for ``detect``.
        message (str | None): Error description when ``code`` is not 200.
    """

    code: int
    lang: str = ""
    text: list[str] = field(default_factory=list)
    message: str | None = None


@dataclass_json
@dataclass
class YandexLanguagesResponse(DataClassJsonMixin):
    """Body of the Yandex ``getLangs`` method."""

    dirs: list[str] = field(default_factory=list)
    langs: dict[str, str] = field(default_factory=dict)
    code: int | None = None
    message: str | None = None
