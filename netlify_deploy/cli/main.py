# netlify_deploy/cli/main.py
"""Main CLI entry point for netlify-deploy"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from ..__version__ import __version__
from ..constants import APP_NAME, ENV_LOG_LEVEL, LOG_FORMAT
from ..models.config import Config
from ..services.config_service import ConfigService

# Import all commands
from .commands import deploy, doctor, state

console = Console()


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.getLevelName(os.environ.get(ENV_LOG_LEVEL, "WARNING").upper())
        if not isinstance(level, int):
            level = logging.WARNING

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ]
    )

    # Adjust third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiofiles").setLevel(logging.WARNING)


class Context:
    """CLI context object with lazy configuration loading"""

    def __init__(self):
        self.verbose: bool = False
        self.debug: bool = False
        self.quiet: bool = False
        self.config_path: Optional[Path] = None
        self._config_service: Optional[ConfigService] = None

    @property
    def config_service(self) -> ConfigService:
        if self._config_service is None:
            self._config_service = ConfigService(self.config_path)
        return self._config_service

    @property
    def config(self) -> Config:
        """Loaded project configuration (raises ConfigError)"""
        return self.config_service.config


@click.group(name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.option('-c', '--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
              help='Path to .netlify-deploy.yaml')
@click.version_option(__version__, prog_name=APP_NAME)
@click.pass_context
def cli(ctx, verbose, debug, quiet, config_path):
    """Netlify Deploy - publish build output through the Netlify CLI

    Locates or installs the Netlify CLI, authenticates, resolves the site
    each target deploys to and runs `ntl deploy`, remembering site ids so
    later runs need no prompting.
    """
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    ctx.obj = Context()
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug
    ctx.obj.quiet = quiet
    ctx.obj.config_path = config_path


# Register commands
cli.add_command(deploy.deploy)
cli.add_command(doctor.doctor)
cli.add_command(state.state)


def main():
    """Main entry point for the CLI application

    This function handles:
    - Keyboard interrupts (running deploys are cancelled first)
    - Unexpected exceptions with proper error display
    """
    try:
        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
