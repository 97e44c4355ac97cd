from dataclasses import dataclass
from typing import List, Sequence, Union

CONFIG_FILE_PREFIXES = ("--config-file=", "--config=")
CONFIG_SECRETS_DIR_PREFIX = "--config-secrets-dir="
CONFIG_ENV_FLAG = "--config-env"


@dataclass(frozen=True)
class EnvironmentSource:
    """Process environment variables."""

    def __str__(self) -> str:
        return "environment"

@dataclass(frozen=True)
class FileSource:
    """A JSON or YAML document on disk."""
    path: str

    def __str__(self) -> str:
        return f"file '{self.path}'"

@dataclass(frozen=True)
class SecretsDirectorySource:
    """A directory holding one secret value per file."""
    path: str

    def __str__(self) -> str:
        return f"secrets directory '{self.path}'"

SourceDescriptor = Union[EnvironmentSource, FileSource, SecretsDirectorySource]


def parse_source_descriptors(argv: Sequence[str]) -> List[SourceDescriptor]:
    """
    Extract configuration source descriptors from process arguments.

    Descriptors are returned in encounter order. Arguments that are not
    recognized are ignored since they may belong to the embedding application.
    A repeated --config-env flag yields a single environment source.
    """
    descriptors: List[SourceDescriptor] = []
    for arg in argv:
        if arg == CONFIG_ENV_FLAG:
            if EnvironmentSource() not in descriptors:
                descriptors.append(EnvironmentSource())
        elif arg.startswith(CONFIG_SECRETS_DIR_PREFIX):
            descriptors.append(SecretsDirectorySource(arg[len(CONFIG_SECRETS_DIR_PREFIX):]))
        else:
            for prefix in CONFIG_FILE_PREFIXES:
                if arg.startswith(prefix):
                    descriptors.append(FileSource(arg[len(prefix):]))
                    break
    return descriptors


def order_by_precedence(descriptors: Sequence[SourceDescriptor]) -> List[SourceDescriptor]:
    """
    Sort descriptors from highest to lowest priority.

    Environment first, then secrets directories, then files. Within a tier
    the encounter order is kept, so an earlier flag shadows a later one.
    """
    tiers = {EnvironmentSource: 0, SecretsDirectorySource: 1, FileSource: 2}
    return sorted(descriptors, key=lambda d: tiers[type(d)])
