"""Callback-driven asynchronous dispatch of translation requests.

`Translator` is the base class of every backend. Its public methods never block the
calling thread: each call schedules one task on a worker event loop owned by the
translator, and the outcome is reported to exactly one of the supplied callbacks.

Threading model:
    - The worker loop runs on one background thread, started on the first submission.
    - At most ``max_workers`` remote operations run at once; further submissions wait
      on a semaphore inside the loop.
    - Callbacks run on a pool of ``max_workers`` callback threads, off the worker loop,
      so a slow callback delays neither other remote operations nor other deliveries.
      The one exception is the rejection of a submission made after shutdown began,
      which is reported to ``on_error`` synchronously on the caller's thread with
      SHUTDOWN_ERROR_CODE.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Final, Self

from config.loader import CredentialNotFoundError
from core.trans.interface import (
    INTERNAL_ERROR_CODE,
    SHUTDOWN_ERROR_CODE,
    TransInterface,
    TranslationError,
)
from models.language_models import Language, Text
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable, Coroutine

__all__: list[str] = [
    "DEFAULT_MAX_WORKERS",
    "DEFAULT_REQUEST_TIMEOUT",
    "DEFAULT_SHUTDOWN_TIMEOUT",
    "Translator",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DEFAULT_MAX_WORKERS: Final[int] = 4
DEFAULT_REQUEST_TIMEOUT: Final[float] = 10.0
DEFAULT_SHUTDOWN_TIMEOUT: Final[float] = 10.0
# Shared upper bound for closing the backend and joining the worker thread once draining is over
_CLOSE_TIMEOUT: Final[float] = 2.0


def _ignore_error(err: TranslationError) -> None:
    logger.debug("Unhandled translation error: %r", err)


class _State(Enum):
    RUNNING = auto()
    DRAINING = auto()
    CLOSED = auto()


class Translator(TransInterface):
    """Base class for translation backends with a callback-based asynchronous API.

    Subclasses implement the remote operations of TransInterface. Callers use
    translate(), identify() and has_support(), then shutdown() once done.

    Callbacks may be invoked concurrently with the caller's own code and must not call
    shutdown(); doing so raises RuntimeError inside the callback.

    Example:
        translator.translate(Text("dog", Language.EN), Language.NL, print, on_error=print)
        translator.shutdown(10)
    """

    def __init__(
        self,
        api_key: str,
        host: str,
        *,
        max_workers: int = DEFAULT_MAX_WORKERS,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the translator.

        Args:
            api_key (str): API key of the service.
            host (str): Base URL of the service.
            max_workers (int): Maximum number of remote operations running at once.
            request_timeout (float): Total timeout of one HTTP request in seconds.

        Raises:
            CredentialNotFoundError: If ``api_key`` is empty.
            ValueError: If ``max_workers`` is less than 1.
        """
        msg: str
        if not api_key:
            msg = f"'{self.__class__.__name__}' requires an API key"
            raise CredentialNotFoundError(msg)
        if max_workers < 1:
            msg = f"max_workers must be at least 1: {max_workers}"
            raise ValueError(msg)

        self.__api_key: str = api_key
        self.__host: str = host
        self._max_workers: int = max_workers
        self._request_timeout: float = request_timeout

        self._state: _State = _State.RUNNING
        # RLock: a future that completes immediately runs its done-callback while the lock is held
        self._state_lock: threading.RLock = threading.RLock()
        self._shutdown_lock: threading.Lock = threading.Lock()
        # only held while checking _abandoned, never while a callback runs
        self._delivery_lock: threading.Lock = threading.Lock()
        self._abandoned: bool = False
        self._pending: set[concurrent.futures.Future[None]] = set()
        self._in_callback: threading.local = threading.local()

        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._semaphore: asyncio.Semaphore | None = None
        self._callbacks: ThreadPoolExecutor | None = None
        logger.debug("'%s' created for '%s' (max_workers=%d)", self.__class__.__name__, host, max_workers)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        _ = exc_type, exc_val, exc_tb
        self.shutdown(DEFAULT_SHUTDOWN_TIMEOUT)

    @staticmethod
    def fetch_engine_name() -> str:
        # Not a concrete service; subclasses provide their own name.
        return ""

    def get_api_key(self) -> str:
        return self.__api_key

    def get_host(self) -> str:
        return self.__host

    @property
    def max_workers(self) -> int:
        return self._max_workers

    @property
    def request_timeout(self) -> float:
        return self._request_timeout

    @property
    def is_shutdown(self) -> bool:
        """True once shutdown() has been called, even while it is still draining."""
        with self._state_lock:
            return self._state is not _State.RUNNING

    def translate(
        self,
        source: Text,
        tgt_lang: Language,
        on_success: Callable[[list[Text]], Any],
        on_error: Callable[[TranslationError], Any] = _ignore_error,
    ) -> None:
        """Translate ``source`` into ``tgt_lang`` in the background.

        Args:
            source (Text): Text to translate. An unset language means auto-detect.
            tgt_lang (Language): Target language.
            on_success (Callable[[list[Text]], Any]): Receives the translations.
            on_error (Callable[[TranslationError], Any]): Receives the failure. Defaults to a no-op.

        Raises:
            TypeError: If an argument has the wrong type.
        """
        self._check_type("source", source, Text)
        self._check_type("tgt_lang", tgt_lang, Language)
        self._check_callbacks(on_success, on_error)
        self._submit("translate", lambda: self.translation(source, tgt_lang), on_success, on_error)

    def identify(
        self,
        content: str,
        on_success: Callable[[list[Language]], Any],
        on_error: Callable[[TranslationError], Any] = _ignore_error,
    ) -> None:
        """Identify the language of ``content`` in the background.

        Text that belongs to no known language is reported to ``on_error`` with code 404.

        Raises:
            TypeError: If an argument has the wrong type.
        """
        self._check_type("content", content, str)
        self._check_callbacks(on_success, on_error)
        self._submit("identify", lambda: self.detect_language(content), on_success, on_error)

    def has_support(
        self,
        src_lang: Language,
        tgt_lang: Language,
        on_success: Callable[[bool], Any],
        on_error: Callable[[TranslationError], Any] = _ignore_error,
    ) -> None:
        """Check in the background whether ``src_lang`` to ``tgt_lang`` is offered.

        Raises:
            TypeError: If an argument has the wrong type.
        """
        self._check_type("src_lang", src_lang, Language)
        self._check_type("tgt_lang", tgt_lang, Language)
        self._check_callbacks(on_success, on_error)
        self._submit("has_support", lambda: self.check_support(src_lang, tgt_lang), on_success, on_error)

    def shutdown(self, timeout: float) -> None:
        """Stop accepting work and wait for queued and running tasks.

        Blocks for at most ``timeout`` seconds while tasks drain, plus at most
        ``_CLOSE_TIMEOUT`` seconds to close the backend and stop the worker loop. Tasks
        still unfinished at the timeout are abandoned: callbacks not yet started are never
        invoked, and the tasks are cancelled at their next await point. A callback that
        started before the timeout is left to finish on its own thread; shutdown does not
        wait for it. A second call returns immediately.

        Args:
            timeout (float): Seconds to wait for outstanding tasks. Negative means 0.

        Raises:
            RuntimeError: If called from a callback of this translator.
        """
        on_worker: bool = self._thread is not None and threading.current_thread() is self._thread
        if on_worker or getattr(self._in_callback, "active", False):
            msg = "shutdown() cannot be called from a callback of the translator it stops"
            raise RuntimeError(msg)

        with self._shutdown_lock:
            with self._state_lock:
                if self._state is _State.CLOSED:
                    logger.debug("'%s' is already shut down", self.__class__.__name__)
                    return
                self._state = _State.DRAINING
                pending: set[concurrent.futures.Future[None]] = set(self._pending)
                loop: asyncio.AbstractEventLoop | None = self._loop
                callbacks: ThreadPoolExecutor | None = self._callbacks

            logger.info("'%s' shutting down: %d task(s) outstanding", self.__class__.__name__, len(pending))
            not_done: set[concurrent.futures.Future[None]] = set()
            if pending:
                _, not_done = concurrent.futures.wait(pending, timeout=max(timeout, 0))

            if not_done:
                with self._delivery_lock:
                    self._abandoned = True
                logger.warning(
                    "'%s' abandoned %d task(s) after %s second(s)", self.__class__.__name__, len(not_done), timeout
                )
                for future in not_done:
                    future.cancel()

            if loop is not None:
                self._stop_loop(loop)
            if callbacks is not None:
                callbacks.shutdown(wait=False, cancel_futures=True)

            with self._state_lock:
                self._state = _State.CLOSED
            logger.info("'%s' process termination", self.__class__.__name__)

    def _check_type(self, name: str, value: object, expected: type) -> None:
        if not isinstance(value, expected):
            msg: str = f"'{name}' must be {expected.__name__}, not {type(value).__name__}"
            raise TypeError(msg)

    def _check_callbacks(self, on_success: object, on_error: object) -> None:
        if not callable(on_success) or not callable(on_error):
            msg = "on_success and on_error must be callable"
            raise TypeError(msg)

    def _submit(
        self,
        operation: str,
        call: Callable[[], Coroutine[Any, Any, Any]],
        on_success: Callable[[Any], Any],
        on_error: Callable[[TranslationError], Any],
    ) -> None:
        with self._state_lock:
            accepted: bool = self._state is _State.RUNNING
            if accepted:
                loop: asyncio.AbstractEventLoop = self._ensure_loop()
                future: concurrent.futures.Future[None] = asyncio.run_coroutine_threadsafe(
                    self._execute(operation, call, on_success, on_error), loop
                )
                self._pending.add(future)
                future.add_done_callback(self._discard_pending)

        if not accepted:
            logger.warning("'%s': '%s' rejected after shutdown", self.__class__.__name__, operation)
            err = TranslationError(SHUTDOWN_ERROR_CODE, f"'{operation}' submitted after shutdown")
            self._invoke(on_error, err)
            return
        logger.debug("'%s': '%s' submitted", self.__class__.__name__, operation)

    def _discard_pending(self, future: concurrent.futures.Future[None]) -> None:
        with self._state_lock:
            self._pending.discard(future)

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        """Start the worker loop thread if it is not running yet. Caller holds _state_lock."""
        if self._loop is not None:
            return self._loop

        loop: asyncio.AbstractEventLoop = asyncio.new_event_loop()
        ready = threading.Event()
        thread = threading.Thread(
            target=self._run_loop,
            args=(loop, ready),
            name=f"{self.__class__.__name__}-worker",
            daemon=True,
        )
        thread.start()
        ready.wait()
        self._semaphore = asyncio.Semaphore(self._max_workers)
        self._callbacks = ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix=f"{self.__class__.__name__}-callback"
        )
        self._loop = loop
        self._thread = thread
        logger.debug("'%s' worker loop started", self.__class__.__name__)
        return loop

    @staticmethod
    def _run_loop(loop: asyncio.AbstractEventLoop, ready: threading.Event) -> None:
        asyncio.set_event_loop(loop)
        loop.call_soon(ready.set)
        try:
            loop.run_forever()
        finally:
            try:
                loop.run_until_complete(loop.shutdown_asyncgens())
            finally:
                loop.close()

    async def _execute(
        self,
        operation: str,
        call: Callable[[], Coroutine[Any, Any, Any]],
        on_success: Callable[[Any], Any],
        on_error: Callable[[TranslationError], Any],
    ) -> None:
        """Run one remote operation and hand its outcome to exactly one callback.

        The semaphore only covers the remote operation. The callback runs on the callback
        pool, so the loop keeps serving other tasks while it executes.
        """
        if self._semaphore is None or self._callbacks is None:
            msg = "worker loop is not initialised"
            raise RuntimeError(msg)

        callback: Callable[[Any], Any]
        value: Any
        async with self._semaphore:
            logger.debug("'%s': '%s' start", self.__class__.__name__, operation)
            try:
                value = await call()
                callback = on_success
                logger.debug("'%s': '%s' completed", self.__class__.__name__, operation)
            except TranslationError as err:
                logger.info("'%s': '%s' failed: %s", self.__class__.__name__, operation, err)
                callback, value = on_error, err
            except Exception as err:  # noqa: BLE001
                logger.exception("'%s': unexpected error in '%s'", self.__class__.__name__, operation)
                callback = on_error
                value = TranslationError(INTERNAL_ERROR_CODE, f"{operation} failed: {err!r}")

        loop: asyncio.AbstractEventLoop = asyncio.get_running_loop()
        await loop.run_in_executor(self._callbacks, self._deliver, callback, value)

    def _deliver(self, callback: Callable[[Any], Any], value: Any) -> None:
        """Invoke ``callback`` on a callback thread unless shutdown has abandoned the task."""
        with self._delivery_lock:
            if self._abandoned:
                logger.debug("'%s': result dropped after shutdown timeout", self.__class__.__name__)
                return
        self._in_callback.active = True
        try:
            self._invoke(callback, value)
        finally:
            self._in_callback.active = False

    def _invoke(self, callback: Callable[[Any], Any], value: Any) -> None:
        try:
            callback(value)
        except Exception:  # noqa: BLE001
            logger.exception("'%s': callback %r raised", self.__class__.__name__, callback)

    def _stop_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Close the backend on the worker loop, then stop the loop and join its thread.

        Both steps share one ``_CLOSE_TIMEOUT`` budget.
        """
        deadline: float = time.monotonic() + _CLOSE_TIMEOUT
        closing: concurrent.futures.Future[None] = asyncio.run_coroutine_threadsafe(self._close_on_loop(), loop)
        try:
            closing.result(timeout=_CLOSE_TIMEOUT)
        except TimeoutError:
            logger.warning("'%s' did not close within %s seconds", self.__class__.__name__, _CLOSE_TIMEOUT)
            closing.cancel()
        except Exception as err:  # noqa: BLE001
            logger.error("'%s' failed to close: %r", self.__class__.__name__, err)

        loop.call_soon_threadsafe(loop.stop)
        if self._thread is not None:
            self._thread.join(max(deadline - time.monotonic(), 0))
            if self._thread.is_alive():
                logger.warning("'%s' worker thread did not stop", self.__class__.__name__)

    async def _close_on_loop(self) -> None:
        current: asyncio.Task[Any] | None = asyncio.current_task()
        leftovers: list[asyncio.Task[Any]] = [task for task in asyncio.all_tasks() if task is not current]
        for task in leftovers:
            task.cancel()
        if leftovers:
            await asyncio.gather(*leftovers, return_exceptions=True)
        await self.close()
