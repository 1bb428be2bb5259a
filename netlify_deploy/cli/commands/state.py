"""Persisted state commands"""

import sys

import click
from rich.console import Console

from ..utils.output import format_state_table
from ...api.exceptions import ConfigError, StateStoreError
from ...core.state_store import StateStore
from ...utils.async_utils import run_async

console = Console()


def _open_store(ctx) -> StateStore:
    try:
        return StateStore(ctx.obj.config.state.path)
    except ConfigError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)


@click.group()
def state():
    """Inspect or reset remembered site ids"""
    pass


@state.command()
@click.pass_context
def show(ctx):
    """Show remembered site ids"""
    store = _open_store(ctx)

    try:
        entries = run_async(store.all())
    except StateStoreError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)

    if not entries:
        console.print(f"[dim]No site ids stored in {store.path}[/dim]")
        return

    console.print(format_state_table(entries))


@state.command()
@click.argument('key', required=False)
@click.pass_context
def clear(ctx, key):
    """Forget one remembered site id (or all of them)"""
    store = _open_store(ctx)

    async def _clear():
        if key:
            removed = 1 if await store.remove(key) else 0
        else:
            removed = await store.clear()
        await store.flush()
        return removed

    try:
        removed = run_async(_clear())
    except StateStoreError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)

    if key and not removed:
        console.print(f"[yellow]⚠ No site id stored for '{key}'[/yellow]")
        return

    console.print(f"[green]✓[/green] Removed {removed} site id(s)")
