"""Deploy command implementation"""

import sys

import click
from rich.console import Console

from ..utils.interactive import ConsoleInteractionService
from ..utils.output import format_pipeline_result
from ...api import Deployer
from ...api.exceptions import ConfigError
from ...core.reporting import ActivityReporter
from ...utils.async_utils import run_async

console = Console()


@click.command()
@click.option('-t', '--target', 'targets', multiple=True,
              help='Target to deploy (repeatable; default: all targets)')
@click.option('--prod', is_flag=True, help='Deploy to production')
@click.option('--alias', help='Deploy to a named alias')
@click.option('--message', help='Deploy message shown in the Netlify UI')
@click.option('--json', 'json_output', is_flag=True,
              help='Ask the Netlify CLI for JSON output')
@click.option('--no-prompt', is_flag=True, help='Never prompt for missing site ids')
@click.option('--parallel', type=click.IntRange(min=1),
              help='Maximum number of targets deployed at once')
@click.pass_context
def deploy(ctx, targets, prod, alias, message, json_output, no_prompt, parallel):
    """Deploy targets to Netlify

    Runs the pipeline: check for the Netlify CLI, install it when missing,
    authenticate, resolve each target's site id and run `ntl deploy`.

    Examples:

        # Deploy every configured target
        netlify-deploy deploy

        # Deploy one target to production
        netlify-deploy deploy --target web --prod
    """
    try:
        config = ctx.obj.config
    except ConfigError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)

    if parallel:
        config.deploy.max_parallel = parallel
    if no_prompt:
        config.deploy.interactive = False

    reporter = ActivityReporter(Console(quiet=ctx.obj.quiet))
    deployer = Deployer(
        config,
        interaction=ConsoleInteractionService(),
        reporter=reporter,
    )

    overrides = {
        "prod": prod or None,
        "alias": alias,
        "message": message,
        "json": json_output or None,
    }

    try:
        result = run_async(deployer.deploy_async(list(targets) or None, **overrides))
    except ValueError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)

    format_pipeline_result(result, console)

    if result.cancelled:
        sys.exit(130)
    if not result.success:
        sys.exit(1)
