from typing import Any, Dict, Iterator, List, Sequence

from ...errors import ConfigurationError
from .providers import ConfigurationProvider, MISSING

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


class LayeredConfiguration:
    """
    Read-only stack of configuration providers.

    Providers are ordered from highest to lowest priority; a lookup probes them
    in that order and returns the first hit.
    """

    def __init__(self, providers: Sequence[ConfigurationProvider]):
        self._providers: List[ConfigurationProvider] = list(providers)

    @property
    def providers(self) -> List[ConfigurationProvider]:
        return list(self._providers)

    def get(self, key: str, default: Any = MISSING) -> Any:
        """
        Get a value by dotted key.

        Raises:
            ConfigurationError: If no provider has the key and no default is given
        """
        for provider in self._providers:
            value = provider.get(key)
            if value is not MISSING:
                return value
        if default is MISSING:
            raise ConfigurationError(f"Configuration key '{key}' is not defined")
        return default

    def get_str(self, key: str, default: Any = MISSING) -> str:
        return str(self.get(key, default))

    def get_int(self, key: str, default: Any = MISSING) -> int:
        value = self.get(key, default)
        if isinstance(value, bool):
            raise ConfigurationError(f"Configuration key '{key}' is not an integer: {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Configuration key '{key}' is not an integer: {value!r}")

    def get_float(self, key: str, default: Any = MISSING) -> float:
        value = self.get(key, default)
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Configuration key '{key}' is not a number: {value!r}")

    def get_bool(self, key: str, default: Any = MISSING) -> bool:
        value = self.get(key, default)
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        raise ConfigurationError(f"Configuration key '{key}' is not a boolean: {value!r}")

    def has(self, key: str) -> bool:
        return any(provider.has(key) for provider in self._providers)

    def keys(self) -> List[str]:
        """All known keys, in first-seen precedence order."""
        seen: Dict[str, None] = {}
        for provider in self._providers:
            for key in provider.keys():
                seen.setdefault(key, None)
        return list(seen)

    def to_dict(self) -> Dict[str, Any]:
        """Merge all providers into a nested dictionary, highest priority winning."""
        result: Dict[str, Any] = {}
        for key in self.keys():
            _set_nested_value(result, key, self.get(key))
        return result

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __repr__(self) -> str:
        sources = ", ".join(str(p) for p in self._providers)
        return f"LayeredConfiguration([{sources}])"


def _set_nested_value(config: Dict[str, Any], path: str, value: Any) -> None:
    """
    Set a nested configuration value using dot notation.

    Paths arrive in precedence order, so anything already in config came from
    the same or a higher-priority provider and is never replaced.
    """
    keys = path.split('.')
    current = config

    # Navigate to the parent of the target key
    for key in keys[:-1]:
        if key not in current:
            current[key] = {}
        elif not isinstance(current[key], dict):
            # A scalar set earlier shadows every key below it
            return
        current = current[key]

    # A deeper key set earlier wins over a scalar at its parent path
    if isinstance(current.get(keys[-1]), dict):
        return
    current[keys[-1]] = value
