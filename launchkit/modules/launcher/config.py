import os
import signal
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, List, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, field_validator

from ..cancellation import CancellationToken
from ..configuration import LayeredConfiguration
from ..registry import ALLOW_CONFLICT_MODULES_ENV

T = TypeVar('T')

LAUNCHKIT_ENV = "LAUNCHKIT_ENV"


def _identity(configuration: LayeredConfiguration) -> Any:
    return configuration


@dataclass(frozen=True)
class NoConfig:
    """The initializer receives None as configuration."""
    pass

@dataclass(frozen=True)
class ParseOnly(Generic[T]):
    """Resolve configuration sources from process arguments, then parse."""
    parser: Callable[[LayeredConfiguration], Union[T, Awaitable[T]]] = field(default=_identity)

@dataclass(frozen=True)
class LoadAndParse(Generic[T]):
    """Load raw configuration with a custom loader, then parse."""
    loader: Callable[[CancellationToken], Awaitable[Any]]
    parser: Callable[[Any], Union[T, Awaitable[T]]] = field(default=lambda raw: raw)

ConfigStrategy = Union[NoConfig, ParseOnly, LoadAndParse]


class LauncherSettings(BaseModel):
    environment: str = "production"
    development_exit_delay: float = 1.0  # seconds to let log sinks flush before a failure exit
    shutdown_signals: List[str] = ["SIGTERM", "SIGINT"]
    allow_conflict_modules: bool = False

    @field_validator('shutdown_signals')
    @classmethod
    def validate_signals(cls, value: List[str]) -> List[str]:
        for name in value:
            if name not in signal.Signals.__members__:
                raise ValueError(f"Unknown signal: {name}")
        return value

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> 'LauncherSettings':
        """Build settings from LAUNCHKIT_* environment variables."""
        environ = os.environ if environ is None else environ
        return cls(
            environment=environ.get(LAUNCHKIT_ENV, "production"),
            allow_conflict_modules=environ.get(ALLOW_CONFLICT_MODULES_ENV) == "1"
        )
