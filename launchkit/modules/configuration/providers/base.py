from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional

from ...cancellation import CancellationToken
from ..descriptors import SourceDescriptor

MISSING = object()


class ConfigurationProvider(ABC):
    """Base class for key/value configuration providers."""

    def __init__(self, descriptor: SourceDescriptor) -> None:
        """Initialize the provider."""
        self.descriptor = descriptor

    @abstractmethod
    async def load(self, token: CancellationToken) -> None:
        """Read the underlying source."""
        pass

    @abstractmethod
    def get(self, key: str, default: Any = MISSING) -> Any:
        """Return the value for a dotted key, or default when absent."""
        pass

    @abstractmethod
    def keys(self) -> Iterable[str]:
        """Dotted keys this provider can answer."""
        pass

    def has(self, key: str) -> bool:
        return self.get(key) is not MISSING

    def __str__(self) -> str:
        return str(self.descriptor)


class DictProvider(ConfigurationProvider):
    """Provider backed by a flat dictionary of dotted keys."""

    def __init__(self, descriptor: SourceDescriptor, values: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(descriptor)
        self.values: Dict[str, Any] = dict(values or {})

    async def load(self, token: CancellationToken) -> None:
        pass

    def get(self, key: str, default: Any = MISSING) -> Any:
        return self.values.get(key, default)

    def keys(self) -> Iterable[str]:
        return self.values.keys()


def flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested mappings into dotted keys; lists stay leaf values."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        path = f"{prefix}{key}"
        if isinstance(value, dict) and value:
            flat.update(flatten(value, f"{path}."))
        else:
            flat[path] = value
    return flat
