"""Cooperative cancellation primitives shared by the launcher and the runtime initializer."""

import asyncio
import threading
from typing import Callable, List, Optional

from ..logging import BaseLogger

CancelListener = Callable[[], None]


class CancelledError(asyncio.CancelledError):
    """Raised by code observing a cancelled token."""

    def __init__(self, message: str = "Operation was cancelled"):
        super().__init__(message)


class CancellationToken:
    """Read-only view of a CancellationSource.

    Code holding a token can only observe cancellation; transitioning the
    state is reserved to the source that created it.
    """

    def __init__(self, source: 'CancellationSource'):
        self._source = source

    @property
    def is_cancellation_requested(self) -> bool:
        return self._source.is_cancelled

    def add_cancel_listener(self, listener: CancelListener) -> None:
        """
        Register a callback invoked once when cancellation is requested.

        A listener added after cancellation runs immediately.
        """
        self._source._add_listener(listener)

    def remove_cancel_listener(self, listener: CancelListener) -> None:
        self._source._remove_listener(listener)

    def throw_if_cancellation_requested(self) -> None:
        if self._source.is_cancelled:
            raise CancelledError()


class CancellationSource:
    """Owner of a cancellation state: Active until cancel() moves it to Cancelled."""

    def __init__(self, logger: Optional[BaseLogger] = None):
        self.logger = logger
        self._lock = threading.Lock()
        self._cancelled = False
        self._listeners: List[CancelListener] = []
        self.token = CancellationToken(self)

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Request cancellation. Calling it again is a no-op."""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            listeners = list(self._listeners)
            self._listeners.clear()

        for listener in listeners:
            self._notify(listener)

    def _notify(self, listener: CancelListener) -> None:
        try:
            listener()
        except Exception as e:
            if self.logger:
                self.logger.log_error(f"Error in cancel listener: {str(e)}")

    def _add_listener(self, listener: CancelListener) -> None:
        with self._lock:
            if not self._cancelled:
                self._listeners.append(listener)
                return
        self._notify(listener)

    def _remove_listener(self, listener: CancelListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)


async def cancellable_sleep(token: CancellationToken, seconds: float) -> None:
    """
    Sleep for the given delay unless the token is cancelled first.

    Raises:
        CancelledError: If the token is (or becomes) cancelled
    """
    token.throw_if_cancellation_requested()

    loop = asyncio.get_running_loop()
    cancelled = loop.create_future()

    def on_cancel() -> None:
        # Listeners may fire from a signal handler thread
        loop.call_soon_threadsafe(_resolve, cancelled)

    token.add_cancel_listener(on_cancel)
    try:
        await asyncio.wait_for(asyncio.shield(cancelled), timeout=seconds)
    except asyncio.TimeoutError:
        return
    finally:
        token.remove_cancel_listener(on_cancel)
        if not cancelled.done():
            cancelled.cancel()

    raise CancelledError()


def _resolve(future: 'asyncio.Future[None]') -> None:
    if not future.done():
        future.set_result(None)
