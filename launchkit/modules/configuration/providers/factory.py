from typing import Mapping, Optional

from ..descriptors import EnvironmentSource, FileSource, SecretsDirectorySource, SourceDescriptor
from .base import ConfigurationProvider
from .environment import EnvironmentProvider
from .file import FileProvider
from .secrets import SecretsDirectoryProvider


def create_provider(
    descriptor: SourceDescriptor,
    environ: Optional[Mapping[str, str]] = None
) -> ConfigurationProvider:
    """
    Create a configuration provider for a source descriptor.

    Args:
        descriptor: The source to read
        environ: Environment mapping used instead of os.environ

    Returns:
        ConfigurationProvider: The created provider, not loaded yet
    """
    if isinstance(descriptor, EnvironmentSource):
        return EnvironmentProvider(descriptor, environ)
    elif isinstance(descriptor, SecretsDirectorySource):
        return SecretsDirectoryProvider(descriptor)
    elif isinstance(descriptor, FileSource):
        return FileProvider(descriptor)
    raise TypeError(f"Unsupported configuration source: {descriptor!r}")
