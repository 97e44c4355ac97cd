import json
from pathlib import Path
from typing import Any

import yaml

from ....errors import ConfigurationError
from ...cancellation import CancellationToken
from ..descriptors import FileSource
from .base import DictProvider, flatten


class FileProvider(DictProvider):
    """Configuration provider backed by a JSON or YAML document."""

    def __init__(self, descriptor: FileSource):
        super().__init__(descriptor)
        self.path = Path(descriptor.path).expanduser()

    async def load(self, token: CancellationToken) -> None:
        """
        Read and flatten the document.

        Raises:
            OSError: If the file cannot be read
            ConfigurationError: If the document is malformed or not a mapping
        """
        with open(self.path, "r", encoding="utf-8") as f:
            content = f.read()

        data = self._parse(content)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration document must be a mapping", self.descriptor)

        self.values = flatten(data)

    def _parse(self, content: str) -> Any:
        suffix = self.path.suffix.lower()
        try:
            if suffix in (".yaml", ".yml"):
                return yaml.safe_load(content)
            return json.loads(content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML format: {str(e)}", self.descriptor)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON format: {str(e)}", self.descriptor)
