"""Lookup of translation services by identifier.

`resolve()` turns a service identifier into a ready-to-use Translator bound to the
service's fixed endpoint. The API key comes from an explicit credentials mapping,
which defaults to the process environment.
"""

from __future__ import annotations

import os
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from config.loader import CredentialNotFoundError
from core.trans.engines import GoogleTranslation, YandexTranslation  # noqa: F401
from core.trans.interface import TransInterface
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Mapping

    from core.trans.translator import Translator
    from models.config_models import Translation

__all__: list[str] = ["ENDPOINTS", "ServiceKey", "resolve"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class ServiceKey(StrEnum):
    """Identifier of a supported service; the value is the engine name."""

    GOOGLE = "google"
    YANDEX = "yandex"

    @property
    def var(self) -> str:
        """Name of the environment variable holding the API key, e.g. ``GOOGLE_API_KEY``."""
        return f"{self.name}_API_KEY"


ENDPOINTS: Final[dict[ServiceKey, str]] = {
    ServiceKey.GOOGLE: "https://translation.googleapis.com/language/translate/v2",
    ServiceKey.YANDEX: "https://translate.yandex.net/api/v1.5/tr.json/",
}


def resolve(
    service: ServiceKey | str,
    *,
    credentials: Mapping[str, str] | None = None,
    settings: Translation | None = None,
) -> Translator:
    """Create a new translator for a service.

    Each call returns a fresh, independent instance.

    Args:
        service (ServiceKey | str): Service identifier, e.g. ``"google"``.
        credentials (Mapping[str, str] | None): Source of API keys, keyed by ServiceKey.var.
            Defaults to ``os.environ``.
        settings (Translation | None): Worker and timeout settings. Defaults are used when None.

    Returns:
        Translator: The translator for the service.

    Raises:
        ValueError: If the service identifier is unknown.
        CredentialNotFoundError: If the service's API key is missing or empty.
    """
    try:
        key = ServiceKey(str(service).lower())
    except ValueError:
        msg: str = f"Unknown translation service '{service}'. Choose one of {[k.value for k in ServiceKey]}."
        raise ValueError(msg) from None

    source: Mapping[str, str] = os.environ if credentials is None else credentials
    api_key: str = source.get(key.var, "")
    if not api_key:
        msg = f"API key {key.var} not set"
        logger.critical(msg)
        raise CredentialNotFoundError(msg)

    engine_cls: type[TransInterface] | None = TransInterface.registered.get(key.value)
    if engine_cls is None:
        msg = f"Translation class not found: '{key.value}'"
        raise ValueError(msg)

    kwargs: dict[str, int | float] = {}
    if settings is not None:
        kwargs = {"max_workers": settings.MAX_WORKERS, "request_timeout": settings.REQUEST_TIMEOUT}

    translator: Translator = engine_cls(api_key, ENDPOINTS[key], **kwargs)  # type: ignore[call-arg]
    logger.info("Translation engine resolved: '%s'", key.value)
    return translator
