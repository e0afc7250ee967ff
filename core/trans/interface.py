"""This module defines the remote operations every translation backend implements,
and the TranslationError raised by them.

TranslationError is the one failure shape seen by callers, whatever the backend:
a remote status code, or one of the reserved codes defined here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Final

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.language_models import Language, Text

__all__: list[str] = [
    "INTERNAL_ERROR_CODE",
    "NOT_FOUND_ERROR_CODE",
    "RESPONSE_FORMAT_ERROR_CODE",
    "SHUTDOWN_ERROR_CODE",
    "TRANSPORT_ERROR_CODE",
    "TransInterface",
    "TranslationError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

SHUTDOWN_ERROR_CODE: Final[int] = 0  # submitted after shutdown began
NOT_FOUND_ERROR_CODE: Final[int] = 404  # text not attributable to any language
TRANSPORT_ERROR_CODE: Final[int] = -1  # no response received
RESPONSE_FORMAT_ERROR_CODE: Final[int] = -2  # unparseable response body
INTERNAL_ERROR_CODE: Final[int] = -3  # unexpected exception inside a backend


class TranslationError(Exception):
    """A failed remote operation.

    Attributes:
        code (int): The remote status code, or one of the reserved codes of this module.
        message (str | None): Optional description of the failure.
    """

    def __init__(self, code: int, message: str | None = None) -> None:
        self._code: int = code
        self._message: str | None = message
        super().__init__(code, message)

    @property
    def code(self) -> int:
        return self._code

    @property
    def message(self) -> str | None:
        return self._message

    def __str__(self) -> str:
        if self._message:
            return f"[{self._code}] {self._message}"
        return f"[{self._code}]"

    def __repr__(self) -> str:
        return f"TranslationError(code={self._code!r}, message={self._message!r})"


class TransInterface(ABC):
    """Abstract base class for translation services.

    Subclasses implement the three remote operations as coroutines. Each one performs a
    single request and either returns the complete result or raises TranslationError;
    query construction and response parsing stay inside the backend.

    Attributes:
        registered (ClassVar[dict[str, type[TransInterface]]]): Registered backend classes,
            keyed by their distinguished names.
    """

    registered: ClassVar[dict[str, type[TransInterface]]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        """Register the subclass under its distinguished name.

        Classes returning an empty name (abstract intermediates, test doubles) are not registered.

        Raises:
            ValueError: If another class already uses the same name.
        """
        super().__init_subclass__(**kwargs)
        name: str = cls.fetch_engine_name()
        if not isinstance(name, str) or name == "":
            return

        if name in cls.registered:
            msg: str = f"A translation engine with the name '{name}' is already registered."
            raise ValueError(msg)

        cls.registered[name] = cls
        logger.debug("Registered translation engine '%s': %s", name, cls.__name__)

    @staticmethod
    @abstractmethod
    def fetch_engine_name() -> str:
        """Fetch the distinguished name of the translation engine.

        Called during class registration in __init_subclass__, so the implementation must be
        available at subclass definition time.
        """
        raise NotImplementedError

    @abstractmethod
    async def translation(self, source: Text, tgt_lang: Language) -> list[Text]:
        """Translate text into the target language.

        When ``source`` carries a language, that source-to-target direction is requested;
        otherwise the service detects the source language.

        Args:
            source (Text): Text to translate.
            tgt_lang (Language): Target language.

        Returns:
            list[Text]: One or more translations, each tagged with ``tgt_lang``.

        Raises:
            TranslationError: With the remote status code on any non-success response.
        """
        raise NotImplementedError

    @abstractmethod
    async def detect_language(self, content: str) -> list[Language]:
        """Identify the language of the text.

        Returns:
            list[Language]: Candidate languages in the order the service returned them.

        Raises:
            TranslationError: With NOT_FOUND_ERROR_CODE when the text cannot be attributed to
                any known language, otherwise with the remote status code.
        """
        raise NotImplementedError

    @abstractmethod
    async def check_support(self, src_lang: Language, tgt_lang: Language) -> bool:
        """Check whether the service translates from ``src_lang`` to ``tgt_lang``.

        Raises:
            TranslationError: With the remote status code on any non-success response.
        """
        raise NotImplementedError

    @abstractmethod
    async def close(self) -> None:
        """Release resources held by the backend, such as its HTTP session."""
        raise NotImplementedError
