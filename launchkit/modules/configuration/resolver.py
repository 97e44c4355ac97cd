"""Builds a LayeredConfiguration from configuration source descriptors."""

from typing import List, Mapping, Optional, Sequence

from ...errors import ConfigurationError
from ..cancellation import CancellationToken
from ..logging import BaseLogger
from .descriptors import SourceDescriptor, order_by_precedence, parse_source_descriptors
from .layered import LayeredConfiguration
from .providers import ConfigurationProvider, create_provider


async def resolve(
    descriptors: Sequence[SourceDescriptor],
    token: CancellationToken,
    logger: Optional[BaseLogger] = None,
    environ: Optional[Mapping[str, str]] = None
) -> LayeredConfiguration:
    """
    Load every source and stack them by precedence.

    Sources are loaded one after another, highest priority first; the
    command line order only matters within a tier.

    Args:
        descriptors: Sources in encounter order
        token: Checked before each load begins
        logger: Optional logger for load progress
        environ: Environment mapping used instead of os.environ

    Returns:
        LayeredConfiguration: The resolved configuration

    Raises:
        ConfigurationError: If no source is given or a document is malformed
        CancelledError: If the token is cancelled before a load begins
        OSError: If a source cannot be read; the source is attached as a note
    """
    if not descriptors:
        raise ConfigurationError("no configuration source provided")

    providers: List[ConfigurationProvider] = []
    for descriptor in order_by_precedence(descriptors):
        token.throw_if_cancellation_requested()

        provider = create_provider(descriptor, environ)
        if logger and logger.is_debug_enabled:
            logger.log_debug(f"Loading configuration from {descriptor}")
        try:
            await provider.load(token)
        except ConfigurationError:
            raise
        except Exception as e:
            e.add_note(f"while loading configuration from {descriptor}")
            raise
        providers.append(provider)

    return LayeredConfiguration(providers)


async def resolve_from_argv(
    argv: Sequence[str],
    token: CancellationToken,
    logger: Optional[BaseLogger] = None,
    environ: Optional[Mapping[str, str]] = None
) -> LayeredConfiguration:
    """Parse source flags out of process arguments and resolve them."""
    return await resolve(parse_source_descriptors(argv), token, logger, environ)
