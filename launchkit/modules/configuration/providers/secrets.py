from pathlib import Path

from ...cancellation import CancellationToken
from ..descriptors import SecretsDirectorySource
from .base import DictProvider


class SecretsDirectoryProvider(DictProvider):
    """
    Configuration provider backed by a directory of secret files.

    Every regular file is one key named after the file, its content is the
    value. Hidden entries (such as the ..data links of mounted volumes) are
    skipped.
    """

    def __init__(self, descriptor: SecretsDirectorySource):
        super().__init__(descriptor)
        self.path = Path(descriptor.path).expanduser()

    async def load(self, token: CancellationToken) -> None:
        if not self.path.is_dir():
            raise NotADirectoryError(f"Secrets directory not found: {self.path}")

        values = {}
        for entry in sorted(self.path.iterdir()):
            if entry.name.startswith(".") or not entry.is_file():
                continue
            token.throw_if_cancellation_requested()
            values[entry.name] = entry.read_text(encoding="utf-8").rstrip("\r\n")
        self.values = values
