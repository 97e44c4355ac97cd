"""launchkit: bootstrap an asyncio runtime with layered configuration and graceful shutdown."""

from .errors import (
    ConfigurationError, InitializationError, LaunchError, ModuleConflictError,
    UnhandledAsyncError, WrongUsageError
)
from .modules.cancellation import CancellationSource, CancellationToken, CancelledError, cancellable_sleep
from .modules.configuration import LayeredConfiguration, model_parser
from .modules.launcher import LauncherSettings, Launcher, LoadAndParse, NoConfig, ParseOnly, launch
from .version import __version__

__all__ = [
    'ConfigurationError', 'InitializationError', 'LaunchError', 'ModuleConflictError',
    'UnhandledAsyncError', 'WrongUsageError', 'CancellationSource', 'CancellationToken',
    'CancelledError', 'cancellable_sleep', 'LayeredConfiguration', 'model_parser',
    'LauncherSettings', 'Launcher', 'LoadAndParse', 'NoConfig', 'ParseOnly', 'launch',
    '__version__'
]
