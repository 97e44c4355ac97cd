"""Shutdown coordinator forwarding the first termination signal into a single teardown."""

import asyncio
from asyncio import AbstractEventLoop, Task
import signal
from typing import Any, Callable, Dict, Optional, Protocol, Sequence, Union
import types

from ..cancellation import CancellationSource
from ..logging import BaseLogger
from .guard import ShutdownGuard

# Type for signal handlers
SignalHandlerType = Union[Callable[[int, Optional[types.FrameType]], Any], int, None]

EXIT_OK = 0
EXIT_SHUTDOWN_FAILED = 127


class Runtime(Protocol):
    async def destroy(self) -> None: ...


class ShutdownCoordinator:
    """Runs the runtime teardown exactly once, whatever the number of signals received."""

    def __init__(
        self,
        logger: BaseLogger,
        source: CancellationSource,
        on_complete: Callable[[int], None],
        signals: Sequence[str] = ("SIGTERM", "SIGINT"),
        guard: Optional[ShutdownGuard] = None
    ):
        """
        Initialize the shutdown coordinator.

        Args:
            logger: Logger instance for logging shutdown events
            source: Cancellation source cancelled when shutdown begins
            on_complete: Called with the exit code once teardown has finished
            signals: Names of the signals triggering shutdown
            guard: Counter admitting a single teardown
        """
        self.logger = logger
        self.source = source
        self.on_complete = on_complete
        self.signals = [signal.Signals[name] for name in signals]
        self.guard = guard or ShutdownGuard()
        self._runtime: Optional[Runtime] = None
        self._active_loop: Optional[AbstractEventLoop] = None
        self._shutdown_task: Optional[Task[None]] = None
        self._original_handlers: Dict[signal.Signals, SignalHandlerType] = {}

    @property
    def is_shutting_down(self) -> bool:
        """Check if shutdown is in progress."""
        return self.guard.count > 0

    @property
    def shutdown_task(self) -> Optional[Task[None]]:
        return self._shutdown_task

    def attach(self, loop: AbstractEventLoop, runtime: Runtime) -> None:
        """Bind the started runtime and install signal handlers."""
        self._active_loop = loop
        self._runtime = runtime
        self.setup_signal_handlers()

    def setup_signal_handlers(self) -> None:
        """
        Setup signal handlers for the shutdown signals.
        This should be called from the main thread.
        """
        for sig in self.signals:
            # Store original signal handlers to restore later
            self._original_handlers[sig] = signal.getsignal(sig)
            signal.signal(sig, self._handle_signal)

    def restore_signal_handlers(self) -> None:
        """Restore original signal handlers."""
        for sig, handler in self._original_handlers.items():
            if handler is not None:
                signal.signal(sig, handler)
        self._original_handlers.clear()

    def _handle_signal(self, sig_num: int, frame: Optional[types.FrameType]) -> None:
        """
        Handle termination signals. This is a synchronous method
        that will be called directly by the signal handler.

        Args:
            sig_num: The signal number that was received
            frame: The current stack frame
        """
        if self._active_loop and not self._active_loop.is_closed():
            self._active_loop.call_soon_threadsafe(self.request_shutdown, signal.Signals(sig_num).name)

    def request_shutdown(self, signal_name: str) -> bool:
        """
        Register one shutdown request.

        Only the request that moves the guard from 0 to 1 cancels the source
        and starts the teardown; the others are logged and ignored.

        Returns:
            True if this request started the teardown
        """
        count = self.guard.increment()
        if count > 1:
            if self.logger.is_info_enabled:
                self.logger.log_info(f"Interrupt signal ({count}) received: {signal_name}")
            return False

        self.source.cancel()
        if self.logger.is_info_enabled:
            self.logger.log_info(f"Interrupt signal received: {signal_name}")

        loop = self._active_loop or asyncio.get_running_loop()
        self._shutdown_task = loop.create_task(self._shutdown())
        return True

    async def _shutdown(self) -> None:
        if self._runtime is None:
            self.on_complete(EXIT_OK)
            return

        try:
            await self._runtime.destroy()
        except Exception as e:
            if self.logger.is_fatal_enabled:
                self.logger.log_fatal(f"Runtime destroy failed with error: {type(e).__name__}: {str(e)}")
            self.on_complete(EXIT_SHUTDOWN_FAILED)
            return

        self.logger.log_debug("Runtime destroyed")
        self.on_complete(EXIT_OK)
