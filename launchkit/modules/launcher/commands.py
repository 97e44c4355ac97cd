import importlib
from typing import Any, Tuple

import click

from .config import NoConfig, ParseOnly
from .launcher import Initializer, launch


def load_initializer(target: str) -> Initializer:
    """Import an initializer from a 'package.module:function' reference."""
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise click.BadParameter(f"Expected 'module:function', got '{target}'", param_hint="TARGET")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"Cannot import module '{module_name}': {str(e)}", param_hint="TARGET")

    initializer: Any = module
    for part in attr.split("."):
        initializer = getattr(initializer, part, None)
        if initializer is None:
            raise click.BadParameter(f"Module '{module_name}' has no attribute '{attr}'", param_hint="TARGET")
    return initializer


def create_run_command() -> click.Command:
    """Create the run command."""

    @click.command(name='run', context_settings={"ignore_unknown_options": True})
    @click.argument('target')
    @click.option('--no-config', is_flag=True, help='Do not resolve configuration, the initializer receives None')
    @click.argument('args', nargs=-1, type=click.UNPROCESSED)
    @click.pass_context
    def run(ctx, target: str, no_config: bool, args: Tuple[str, ...]):
        """Launch the runtime created by TARGET (module:function).

        Configuration sources are read from the remaining arguments:
        --config-env, --config-file=PATH and --config-secrets-dir=PATH.
        Other arguments are left to the application.
        """
        initializer = load_initializer(target)
        strategy = NoConfig() if no_config else ParseOnly()
        launch(initializer, strategy, logger=ctx.obj.logger, argv=list(args))

    return run
