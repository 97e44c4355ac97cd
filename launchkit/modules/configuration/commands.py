import asyncio
import json
import sys
from typing import Optional, Tuple

import click
import yaml

from ...errors import ConfigurationError
from ..cancellation import CancellationSource
from .resolver import resolve_from_argv


def create_config_commands() -> click.Command:
    """Create the config command group."""

    @click.group(name='config')
    @click.pass_context
    def config(ctx):
        """Inspect layered configuration."""
        pass

    @config.command(name='show', context_settings={"ignore_unknown_options": True})
    @click.option('--format', '-f', 'output_format',
                  type=click.Choice(['yaml', 'json']),
                  default='yaml',
                  help='Output format of the merged configuration')
    @click.option('--key', '-k', type=str, help='Print a single dotted key instead of the whole configuration')
    @click.argument('args', nargs=-1, type=click.UNPROCESSED)
    @click.pass_context
    def show(ctx, output_format: str, key: Optional[str], args: Tuple[str, ...]):
        """Resolve configuration sources and print the merged result.

        Sources are given the same way as for the run command:
        --config-env, --config-file=PATH and --config-secrets-dir=PATH.
        """
        logger = ctx.obj.logger
        source = CancellationSource(logger)
        try:
            configuration = asyncio.run(resolve_from_argv(list(args), source.token, logger))
            data = configuration.get(key) if key else configuration.to_dict()
        except ConfigurationError as err:
            logger.log_error(f"Configuration error: {str(err)}")
            sys.exit(1)
        except OSError as err:
            logger.log_error(f"Cannot read configuration: {str(err)}")
            sys.exit(1)

        if output_format == 'json':
            click.echo(json.dumps(data, indent=2))
        else:
            click.echo(yaml.safe_dump(data, sort_keys=False, default_flow_style=False).rstrip())

    return config
