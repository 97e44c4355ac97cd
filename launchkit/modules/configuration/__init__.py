"""Layered configuration resolved from command line source flags."""

from .descriptors import (
    EnvironmentSource, FileSource, SecretsDirectorySource, SourceDescriptor,
    parse_source_descriptors, order_by_precedence
)
from .layered import LayeredConfiguration
from .parser import model_parser
from .resolver import resolve, resolve_from_argv

__all__ = [
    'EnvironmentSource', 'FileSource', 'SecretsDirectorySource', 'SourceDescriptor',
    'parse_source_descriptors', 'order_by_precedence', 'LayeredConfiguration',
    'model_parser', 'resolve', 'resolve_from_argv'
]
