# src/mirror/core/loop_runner.py
from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Coroutine, Optional

logger = logging.getLogger(__name__)


class BackgroundLoop:
    """
    An asyncio event loop running on its own daemon thread.

    Flask serves requests on plain threads. Each request submits its upstream
    fetch here and blocks until the fetch finishes or its time runs out.
    """

    def __init__(self, name: str = "mirror-event-loop"):
        self.name = name
        self.loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self.loop is not None

    def start(self) -> None:
        with self._lock:
            if self.loop is not None:
                return
            loop = asyncio.new_event_loop()
            thread = threading.Thread(target=self._serve, args=(loop,), name=self.name, daemon=True)
            thread.start()
            self.loop, self._thread = loop, thread
        logger.debug("Event loop thread '%s' started.", self.name)

    @staticmethod
    def _serve(loop: asyncio.AbstractEventLoop) -> None:
        asyncio.set_event_loop(loop)
        try:
            loop.run_forever()
        finally:
            loop.close()

    def stop(self, join_timeout: float = 5.0) -> None:
        with self._lock:
            loop, thread = self.loop, self._thread
            self.loop, self._thread = None, None
        if loop is None:
            return
        loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(join_timeout)
        logger.debug("Event loop thread '%s' stopped.", self.name)

    def submit(self, coro: Coroutine[Any, Any, Any], timeout: Optional[float] = None) -> Any:
        """
        Runs the coroutine on the loop and waits for its result.

        Raises:
            RuntimeError: When the loop has not been started.
            TimeoutError: When the result is not there within `timeout` seconds.
                          The coroutine is cancelled before this is raised.
        """
        if self.loop is None:
            coro.close()
            raise RuntimeError(f"Event loop '{self.name}' is not running.")

        fut = asyncio.run_coroutine_threadsafe(coro, self.loop)
        try:
            return fut.result(timeout)
        except concurrent.futures.TimeoutError:
            fut.cancel()
            raise TimeoutError(f"No result within {timeout:g}s, the job was cancelled.") from None


_BACKGROUND = BackgroundLoop()


def ensure_background_loop() -> None:
    """Starts the shared background loop once; later calls are no-ops."""
    _BACKGROUND.start()


def stop_background_loop() -> None:
    _BACKGROUND.stop()


def run_on_main_loop(coro: Coroutine[Any, Any, Any], timeout: Optional[float] = None) -> Any:
    """
    Runs a coroutine to completion from synchronous code.

    Uses the shared background loop when it is running, and a one-off
    asyncio.run() otherwise (tests, scripts). Both paths honour `timeout`
    and raise the builtin TimeoutError when it expires.
    """
    if _BACKGROUND.running:
        return _BACKGROUND.submit(coro, timeout)

    if timeout is None:
        return asyncio.run(coro)
    try:
        return asyncio.run(asyncio.wait_for(coro, timeout))
    except asyncio.TimeoutError:
        raise TimeoutError(f"No result within {timeout:g}s, the job was cancelled.") from None
