"""Launch coordination for an asynchronous runtime."""

from .config import ConfigStrategy, LauncherSettings, LoadAndParse, NoConfig, ParseOnly
from .launcher import (
    EXIT_LAUNCH_FAILED, EXIT_OK, EXIT_UNHANDLED_ERROR, Initializer, LaunchState, Launcher, launch
)

__all__ = [
    'ConfigStrategy', 'LauncherSettings', 'LoadAndParse', 'NoConfig', 'ParseOnly',
    'EXIT_LAUNCH_FAILED', 'EXIT_OK', 'EXIT_UNHANDLED_ERROR', 'Initializer',
    'LaunchState', 'Launcher', 'launch'
]
