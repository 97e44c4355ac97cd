from typing import Optional

import click
from launchkit.modules.configuration.commands import create_config_commands
from launchkit.modules.launcher.commands import create_run_command
from launchkit.modules.logging import create_logger, BaseLogger
from launchkit.version import __version__


class LaunchkitContext:
    """Context object to store CLI state."""
    def __init__(self):
        self.logger: Optional[BaseLogger] = None

pass_context = click.make_pass_decorator(LaunchkitContext, ensure=True)

@click.group()
@click.version_option(__version__, prog_name='launchkit')
@click.option('--output', '-o',
              type=click.Choice(['colorful', 'plain', 'json']),
              default='plain',
              help='Log format (colorful for terminals, plain for files and containers, json for collectors)',
              envvar='LAUNCHKIT_OUTPUT')
@click.option('--log-level', '-l',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
              default='INFO',
              help='Set the logging level',
              envvar='LAUNCHKIT_LOG_LEVEL')
@pass_context
def cli(ctx, output, log_level):
    """launchkit: start an asyncio runtime and shut it down gracefully."""
    ctx.logger = create_logger(output, log_level)

# Add commands
cli.add_command(create_run_command())
cli.add_command(create_config_commands())

def main():
    cli()

if __name__ == '__main__':
    main()
