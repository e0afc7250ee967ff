"""Asynchronous HTTP communication used by the translation backends.

The `AsyncHttp` class wraps an aiohttp session and decodes responses with handlers
registered per content type. The session is created lazily, so an instance may be
constructed on any thread and used later from the event loop that performs the requests.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Final

import aiohttp
from aiohttp.client import ClientSession

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

    from aiohttp.client import ClientResponse


__all__: list[str] = ["AsyncCommError", "AsyncCommInvalidContentTypeError", "AsyncCommTimeoutError", "AsyncHttp"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

CONNECT_TIMEOUT: Final[float] = 3.0


class AsyncHttp:
    """Asynchronous HTTP client returning decoded response bodies.

    Default handlers:
        - "text/plain": bytes decoded as UTF-8.
        - "text/html": bytes decoded as UTF-8.
        - "application/json": bytes parsed as JSON.
    """

    def __init__(self, *, total_timeout: float = 10.0) -> None:
        logger.debug("%s initializing", self.__class__.__name__)
        self.__session: ClientSession | None = None
        self.total_timeout: float = total_timeout
        self.content_handlers: dict[str, Callable[[bytes], Any]] = {}

        self.add_handler("text/plain", lambda x: x.decode("utf-8"))
        self.add_handler("text/html", lambda x: x.decode("utf-8"))
        self.add_handler("application/json", lambda x: json.loads(x.decode("utf-8")))

    @property
    def session(self) -> ClientSession:
        """Get the current session, creating it on the running loop when needed."""
        if self.__session is None or self.__session.closed:
            self.__session = ClientSession(raise_for_status=False)
            logger.debug("%s session initialized", self.__class__.__name__)
        return self.__session

    async def close(self) -> None:
        """Close the aiohttp session if it is open."""
        if self.__session is not None and not self.__session.closed:
            await self.__session.close()
            logger.debug("%s session closed", self.__class__.__name__)
        self.__session = None

    async def post(self, *, url: str, params: dict[str, str] | None = None, data: Any | None = None) -> Any:
        """Perform a POST request and return the decoded body.

        Args:
            url (str): Request URL.
            params (dict[str, str] | None): Query parameters. The translation APIs take all
                arguments, the API key included, as query parameters of an empty POST.
            data (Any | None): Optional JSON body.

        Returns:
            Any: The decoded response body, or None for an empty body.

        Raises:
            AsyncCommError: On a non-2xx status or a connection failure. ``status`` holds the
                HTTP status when the server answered.
            AsyncCommTimeoutError: If the request timed out.
            AsyncCommInvalidContentTypeError: If no handler matches the response content type.
        """
        return await self._request(url=url, params=params, json=data)

    async def decode_response(self, resp: ClientResponse) -> Any:
        """Decode a response body with the handler registered for its Content-Type."""
        content_type: str = resp.headers.get("Content-Type", "").split(";")[0].strip()
        logger.debug("'Content-Type': '%s'", content_type)

        raw: bytes = await resp.read()
        if not raw:
            logger.debug("Received empty response")
            return None

        handler: Callable[[bytes], Any] | None = self.content_handlers.get(content_type)
        if handler is None:
            msg: str = f"Unknown Content-Type '{content_type}'"
            raise AsyncCommInvalidContentTypeError(msg, status=resp.status)
        return handler(raw)

    def add_handler(self, content_type: str, handler: Callable[[bytes], Any]) -> None:
        """Register (or replace) the decoder for a content type."""
        if self.content_handlers.get(content_type):
            logger.warning("Handler for content type '%s' already exists, replacing it", content_type)
        self.content_handlers[content_type] = handler

    def _build_timeout(self) -> aiohttp.ClientTimeout:
        if self.total_timeout <= 0:
            return aiohttp.ClientTimeout(total=None)
        if self.total_timeout < CONNECT_TIMEOUT:
            # a connect timeout longer than the total one would be meaningless
            return aiohttp.ClientTimeout(total=self.total_timeout)
        return aiohttp.ClientTimeout(connect=CONNECT_TIMEOUT, total=self.total_timeout)

    async def _request(self, *, url: str, **kwargs: Any) -> Any:
        logger.debug("[POST] url=%s timeout=%s", url, self.total_timeout)
        try:
            async with self.session.post(url, timeout=self._build_timeout(), **kwargs) as resp:
                if resp.status >= 300:
                    body: str = await resp.text(errors="replace")
                    msg: str = f"HTTP {resp.status} {resp.reason or ''}".strip() + f" from {resp.url}"
                    raise AsyncCommError(msg, status=resp.status, body=body)
                return await self.decode_response(resp)

        except TimeoutError as err:
            logger.debug(err)
            msg = "Timeout due to a lack of response from the server."
            raise AsyncCommTimeoutError(msg) from err
        except ConnectionResetError as err:
            logger.debug(err)
            msg = "The connection to the server has been disconnected."
            raise AsyncCommError(msg) from err
        except aiohttp.ClientConnectorError as err:
            logger.debug(err)
            msg = "The server could not be reached."
            raise AsyncCommError(msg) from err
        except aiohttp.ClientError as err:
            logger.debug(err)
            msg = f"HTTP client error: {err}"
            raise AsyncCommError(msg) from err


class AsyncCommError(Exception):
    """Base class for HTTP communication errors.

    Attributes:
        msg (str): Human readable description.
        status (int | None): HTTP status of the response, None when no response was received.
        body (str | None): Raw body of an error response, if any.
    """

    def __init__(self, msg: str | BaseException, *, status: int | None = None, body: str | None = None) -> None:
        self.msg: str = str(msg)
        self.status: int | None = status
        self.body: str | None = body
        if status is not None:
            self.msg = f"{self.msg}: status='{status}'"
        super().__init__(self.msg)


class AsyncCommTimeoutError(AsyncCommError):
    """A request did not complete within the configured timeout."""


class AsyncCommInvalidContentTypeError(AsyncCommError):
    """The response content type has no registered handler."""
