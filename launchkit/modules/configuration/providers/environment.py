import os
from typing import Any, Iterable, Mapping, Optional

from ...cancellation import CancellationToken
from ..descriptors import EnvironmentSource
from .base import ConfigurationProvider, MISSING


def to_env_name(key: str) -> str:
    """Map a dotted key to its variable name: server.port -> SERVER__PORT."""
    return key.upper().replace(".", "__")

def to_key(env_name: str) -> str:
    return env_name.lower().replace("__", ".")


class EnvironmentProvider(ConfigurationProvider):
    """Configuration provider reading process environment variables."""

    def __init__(self, descriptor: EnvironmentSource, environ: Optional[Mapping[str, str]] = None):
        super().__init__(descriptor)
        self._environ = environ
        self.values: Mapping[str, str] = {}

    async def load(self, token: CancellationToken) -> None:
        # Snapshot so later mutations of os.environ do not leak in
        self.values = dict(self._environ if self._environ is not None else os.environ)

    def get(self, key: str, default: Any = MISSING) -> Any:
        return self.values.get(to_env_name(key), default)

    def keys(self) -> Iterable[str]:
        # Mixed or lower-case names (http_proxy) cannot be reached through get()
        return [to_key(name) for name in self.values if to_env_name(to_key(name)) == name]
