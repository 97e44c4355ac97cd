from .base import ConfigurationProvider, DictProvider, MISSING
from .environment import EnvironmentProvider
from .file import FileProvider
from .secrets import SecretsDirectoryProvider
from .factory import create_provider

__all__ = [
    'ConfigurationProvider', 'DictProvider', 'MISSING', 'EnvironmentProvider',
    'FileProvider', 'SecretsDirectoryProvider', 'create_provider'
]
