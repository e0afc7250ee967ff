"""Common HTTP plumbing for the JSON-over-POST translation services."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from core.trans.interface import RESPONSE_FORMAT_ERROR_CODE, TRANSPORT_ERROR_CODE, TranslationError
from core.trans.translator import DEFAULT_MAX_WORKERS, DEFAULT_REQUEST_TIMEOUT, Translator
from handlers.async_comm import AsyncCommError, AsyncCommInvalidContentTypeError, AsyncHttp
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

__all__: list[str] = ["HttpEngine"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

T = TypeVar("T")


class HttpEngine(Translator):
    """Translator whose remote operations are POST requests returning JSON."""

    def __init__(
        self,
        api_key: str,
        host: str,
        *,
        max_workers: int = DEFAULT_MAX_WORKERS,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        super().__init__(api_key, host, max_workers=max_workers, request_timeout=request_timeout)
        self._http: AsyncHttp = AsyncHttp(total_timeout=request_timeout)

    async def _post(self, path: str, params: dict[str, str]) -> Any:
        """POST to ``host + path`` with the API key and ``params`` as query parameters.

        Raises:
            TranslationError: With the HTTP status of an error response, TRANSPORT_ERROR_CODE when
                no response was received, or RESPONSE_FORMAT_ERROR_CODE for an undecodable body.
        """
        url: str = self.get_host() + path
        query: dict[str, str] = {"key": self.get_api_key(), **params}
        try:
            return await self._http.post(url=url, params=query)
        except AsyncCommInvalidContentTypeError as err:
            raise TranslationError(RESPONSE_FORMAT_ERROR_CODE, err.msg) from err
        except AsyncCommError as err:
            code: int = err.status if err.status is not None else TRANSPORT_ERROR_CODE
            logger.debug("'%s': request to '%s' failed: %s", self.__class__.__name__, url, err)
            raise TranslationError(code, err.msg) from err
        except ValueError as err:
            # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors
            msg: str = f"Undecodable response from {url}: {err}"
            raise TranslationError(RESPONSE_FORMAT_ERROR_CODE, msg) from err

    def _decode(self, decoder: Callable[[Any], T], body: Any) -> T:
        """Decode a response body with a dataclasses_json ``from_dict``.

        Raises:
            TranslationError: With RESPONSE_FORMAT_ERROR_CODE if the body does not match.
        """
        try:
            return decoder(body)
        except (KeyError, TypeError, ValueError, AttributeError) as err:
            msg: str = f"Unexpected response format: {err!r}"
            raise TranslationError(RESPONSE_FORMAT_ERROR_CODE, msg) from err

    async def close(self) -> None:
        await self._http.close()
