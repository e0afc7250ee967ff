"""Asynchronous translation, language identification and language-pair support checks.

Callers obtain a translator with `resolve()`, submit work with callbacks, and call
`shutdown()` when done.
"""

from core.trans.interface import (
    INTERNAL_ERROR_CODE,
    NOT_FOUND_ERROR_CODE,
    RESPONSE_FORMAT_ERROR_CODE,
    SHUTDOWN_ERROR_CODE,
    TRANSPORT_ERROR_CODE,
    TransInterface,
    TranslationError,
)
from core.trans.registry import ENDPOINTS, ServiceKey, resolve
from core.trans.translator import Translator

__all__: list[str] = [
    "ENDPOINTS",
    "INTERNAL_ERROR_CODE",
    "NOT_FOUND_ERROR_CODE",
    "RESPONSE_FORMAT_ERROR_CODE",
    "SHUTDOWN_ERROR_CODE",
    "TRANSPORT_ERROR_CODE",
    "ServiceKey",
    "TransInterface",
    "TranslationError",
    "Translator",
    "resolve",
]
