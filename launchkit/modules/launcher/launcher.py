"""Launch coordinator: starts the runtime under a cancellable context and maps every outcome to an exit code."""

import asyncio
from enum import Enum
import inspect
import os
import sys
import time
import traceback
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Sequence

from ...errors import InitializationError, LaunchError, UnhandledAsyncError, WrongUsageError
from ...version import __version__
from ..cancellation import CancellationSource, CancellationToken
from ..configuration import resolve_from_argv
from ..logging import BaseLogger, create_logger
from ..registry import ModuleRegistry
from ..shutdown import Runtime, ShutdownCoordinator
from .config import ConfigStrategy, LauncherSettings, LoadAndParse, NoConfig, ParseOnly

PACKAGE_NAME = "launchkit"

EXIT_OK = 0
EXIT_LAUNCH_FAILED = 127
EXIT_UNHANDLED_ERROR = 255

Initializer = Callable[[CancellationToken, Any], Awaitable[Runtime]]


class LaunchState(str, Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    TERMINATED = "terminated"


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class Launcher:
    """Drives a runtime from startup to process exit."""

    def __init__(
        self,
        initializer: Initializer,
        strategy: Optional[ConfigStrategy] = None,
        logger: Optional[BaseLogger] = None,
        settings: Optional[LauncherSettings] = None,
        argv: Optional[Sequence[str]] = None,
        environ: Optional[Mapping[str, str]] = None,
        registry: Optional[ModuleRegistry] = None,
        exit_func: Callable[[int], Any] = sys.exit
    ):
        """
        Initialize the launcher.

        Args:
            initializer: Async callable receiving the cancellation token and the
                configuration, returning an object with an async destroy()
            strategy: How configuration is obtained, ParseOnly() by default
            logger: Logger instance, a plain logger by default
            settings: Launcher settings, read from the environment by default
            argv: Process arguments without the program name
            environ: Environment mapping used instead of os.environ
            registry: Registry guarding against a duplicate package load
            exit_func: Called with the exit code once the event loop is closed

        Raises:
            WrongUsageError: If the initializer or the strategy is invalid
        """
        if strategy is None:
            strategy = ParseOnly()
        _validate_arguments(initializer, strategy)

        self.initializer = initializer
        self.strategy = strategy
        self.logger = logger or create_logger("plain")
        self.settings = settings or LauncherSettings.from_environ(environ)
        self.argv = list(sys.argv[1:] if argv is None else argv)
        self.environ = environ
        self.registry = registry or ModuleRegistry.get_instance(
            self.settings.allow_conflict_modules, self.logger
        )
        self.exit_func = exit_func
        self.source: Optional[CancellationSource] = None
        self.shutdown: Optional[ShutdownCoordinator] = None
        self.exit_code: Optional[int] = None
        self._exit: Optional['asyncio.Future[int]'] = None

    @property
    def state(self) -> LaunchState:
        if self.exit_code is not None or (self._exit is not None and self._exit.done()):
            return LaunchState.TERMINATED
        if self.shutdown is not None:
            if self.shutdown.is_shutting_down:
                return LaunchState.SHUTTING_DOWN
            return LaunchState.RUNNING
        if self.source is not None:
            return LaunchState.INITIALIZING
        return LaunchState.IDLE

    def run(self) -> int:
        """
        Start the runtime and block until it is shut down, then exit.

        Returns:
            The exit code, only when exit_func returns
        """
        if self.logger.is_info_enabled:
            self.logger.log_info("Starting application...")

        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        loop.set_exception_handler(self._handle_unhandled_error)

        try:
            code = loop.run_until_complete(self._main())
        except Exception as e:
            self._log_launch_failure(e)
            code = EXIT_LAUNCH_FAILED
        finally:
            if self.shutdown:
                self.shutdown.restore_signal_handlers()
            self._close_loop(loop)

        self.exit_code = code
        if code == EXIT_LAUNCH_FAILED and self.settings.is_development:
            time.sleep(self.settings.development_exit_delay)
        self.logger.flush()
        self.exit_func(code)
        return code

    async def _main(self) -> int:
        loop = asyncio.get_running_loop()
        self._exit = loop.create_future()
        self.registry.init(PACKAGE_NAME, __version__)

        self.source = CancellationSource(self.logger)
        init_task = loop.create_task(self._initialize(self.source.token))
        await asyncio.wait({init_task, self._exit}, return_when=asyncio.FIRST_COMPLETED)

        if self._exit.done():
            # An unhandled error terminated the process during startup
            init_task.cancel()
            return self._exit.result()

        try:
            runtime = init_task.result()
        except asyncio.CancelledError:
            self.logger.log_warning("Runtime initialization was cancelled by user")
            return EXIT_OK
        except Exception as e:
            self._log_launch_failure(e)
            return EXIT_LAUNCH_FAILED

        self.shutdown = ShutdownCoordinator(
            self.logger,
            self.source,
            self._terminate,
            signals=self.settings.shutdown_signals
        )
        self.shutdown.attach(loop, runtime)

        if self.logger.is_info_enabled:
            self.logger.log_info(f"Application was started. Process ID: {os.getpid()}")

        return await self._exit

    async def _initialize(self, token: CancellationToken) -> Runtime:
        configuration = await self._load_configuration(token)
        runtime = await self.initializer(token, configuration)
        if not callable(getattr(runtime, "destroy", None)):
            raise WrongUsageError("The initializer must return a runtime with a destroy() method")
        return runtime

    async def _load_configuration(self, token: CancellationToken) -> Any:
        strategy = self.strategy
        if isinstance(strategy, NoConfig):
            return None
        if isinstance(strategy, ParseOnly):
            configuration = await resolve_from_argv(self.argv, token, self.logger, self.environ)
            return await _maybe_await(strategy.parser(configuration))

        raw = await strategy.loader(token)
        token.throw_if_cancellation_requested()
        return await _maybe_await(strategy.parser(raw))

    def _terminate(self, code: int) -> None:
        if self._exit is not None and not self._exit.done():
            self._exit.set_result(code)

    def _handle_unhandled_error(self, loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
        error = UnhandledAsyncError(context)
        if self.logger.is_fatal_enabled:
            self.logger.log_fatal(f"Unhandled error: {error}")
        if error.cause is not None and self.logger.is_debug_enabled:
            self.logger.log_debug("".join(traceback.format_exception(error.cause)))
        self._terminate(EXIT_UNHANDLED_ERROR)

    def _log_launch_failure(self, e: BaseException) -> None:
        if self.logger.is_fatal_enabled:
            if isinstance(e, LaunchError):
                self.logger.log_fatal(f"Cannot launch the application due to an error: {str(e)}")
            else:
                self.logger.log_fatal(f"Runtime initialization failed with error: {InitializationError(e)}")
        if self.logger.is_debug_enabled:
            self.logger.log_debug("".join(traceback.format_exception(e)))

    def _close_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        loop.set_exception_handler(None)
        try:
            pending = asyncio.all_tasks(loop)
            for task in pending:
                task.cancel()
            if pending:
                loop.run_until_complete(
                    asyncio.gather(*pending, return_exceptions=True)
                )
            loop.run_until_complete(loop.shutdown_asyncgens())
        except Exception as e:
            self.logger.log_warning(f"Error cleaning up pending tasks: {str(e)}")
        finally:
            asyncio.set_event_loop(None)
            loop.close()


def _validate_arguments(initializer: Any, strategy: Any) -> None:
    if not callable(initializer):
        raise WrongUsageError("The initializer must be a callable")
    if isinstance(strategy, ParseOnly):
        if not callable(strategy.parser):
            raise WrongUsageError("ParseOnly requires a callable parser")
    elif isinstance(strategy, LoadAndParse):
        if not callable(strategy.loader) or not callable(strategy.parser):
            raise WrongUsageError("LoadAndParse requires a callable loader and parser")
    elif not isinstance(strategy, NoConfig):
        raise WrongUsageError(
            f"Unsupported configuration strategy: {strategy!r}. "
            "Use NoConfig, ParseOnly or LoadAndParse"
        )


def launch(
    initializer: Initializer,
    strategy: Optional[ConfigStrategy] = None,
    **kwargs: Any
) -> None:
    """
    Launch a runtime and terminate the process once it is done.

    Exit codes: 0 for a clean shutdown or a startup cancelled by the user,
    127 when the launch fails, 255 for an unhandled asynchronous error.
    See Launcher for the keyword arguments.
    """
    Launcher(initializer, strategy, **kwargs).run()
