# netlify_deploy/cli/utils/output.py
"""Output formatting utilities"""

from typing import Any, Dict, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ...models import OperationStatus, PipelineResult, StepStatus

console = Console()

_STEP_STYLES = {
    StepStatus.SUCCEEDED: "[green]✓ succeeded[/green]",
    StepStatus.FAILED: "[red]✗ failed[/red]",
    StepStatus.SKIPPED: "[dim]⏭ skipped[/dim]",
    StepStatus.CANCELLED: "[yellow]⚠ cancelled[/yellow]",
    StepStatus.PENDING: "[dim]pending[/dim]",
    StepStatus.RUNNING: "[blue]running[/blue]",
}

_OUTCOME_STYLES = {
    OperationStatus.SUCCESS: "[green]✓ deployed[/green]",
    OperationStatus.FAILED: "[red]✗ failed[/red]",
    OperationStatus.CANCELLED: "[yellow]⚠ cancelled[/yellow]",
    OperationStatus.SKIPPED: "[dim]⏭ skipped[/dim]",
}


def format_pipeline_result(result: PipelineResult, target_console: Optional[Console] = None) -> None:
    """Format and display a pipeline result"""
    out = target_console or console

    steps = Table(title="Pipeline Steps", box=box.ROUNDED)
    steps.add_column("Step", style="cyan")
    steps.add_column("Status", justify="center")
    steps.add_column("Details")

    for step in result.steps.values():
        steps.add_row(
            step.name,
            _STEP_STYLES.get(step.status, step.status.value),
            escape(step.error or step.message or ""),
        )

    out.print(steps)

    targets = Table(title="Targets", box=box.ROUNDED)
    targets.add_column("Target", style="cyan")
    targets.add_column("Status", justify="center")
    targets.add_column("Result")

    for outcome in result.outcomes:
        targets.add_row(
            outcome.target_name,
            _OUTCOME_STYLES.get(outcome.status, outcome.status.value),
            escape(outcome.message or ""),
        )

    out.print(targets)

    if result.success:
        summary = "[green]✓[/green] All targets deployed"
        style = "green"
    elif result.cancelled:
        summary = "[yellow]⚠[/yellow] Deployment cancelled"
        style = "yellow"
    else:
        failed = len(result.failed_outcomes)
        summary = f"[red]✗[/red] Deployment failed ({failed} target(s) failed)"
        style = "red"

    if result.duration is not None:
        summary += f"\n[dim]Took {result.duration:.1f}s[/dim]"

    out.print(Panel(summary, title="Deploy Result", border_style=style))


def format_state_table(entries: Dict[str, Dict[str, Any]]) -> Table:
    """Build a table of persisted site ids"""
    table = Table(title="Remembered Sites", box=box.ROUNDED)
    table.add_column("Key", style="cyan")
    table.add_column("Site ID")
    table.add_column("Updated")

    for key in sorted(entries):
        entry = entries[key]
        table.add_row(key, str(entry.get("site_id", "")), str(entry.get("updated_at", "")))

    return table
