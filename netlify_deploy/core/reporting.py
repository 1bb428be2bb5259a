# netlify_deploy/core/reporting.py
"""Step and task progress reporting"""

from dataclasses import dataclass
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from ..constants import EMOJI_ARROW, EMOJI_ERROR, EMOJI_SUCCESS, EMOJI_WARNING


@dataclass
class ReportEvent:
    """One recorded reporting event"""

    step: str
    kind: str
    message: str = ""
    task: Optional[str] = None


class ReportingTask:
    """A unit of work inside a step

    Usable as an async context manager: an exception escaping the block
    fails the task, a clean exit completes it.
    """

    def __init__(self, step: 'ReportingStep', description: str):
        self.step = step
        self.description = description
        self.state: Optional[str] = None
        self.message: str = ""

    @property
    def is_closed(self) -> bool:
        return self.state is not None

    async def update(self, message: str) -> None:
        """Report progress text (e.g. a streamed output line)"""
        self.step.reporter.record(self.step.title, "task-update", message, self.description)
        self.step.reporter.console.print(f"    [dim]{escape(message)}[/dim]")

    async def complete(self, message: Optional[str] = None) -> None:
        await self._close("complete", message or self.description,
                          f"  [green]{EMOJI_SUCCESS}[/green]")

    async def warn(self, message: str) -> None:
        await self._close("warn", message, f"  [yellow]{EMOJI_WARNING}[/yellow]")

    async def fail(self, message: str) -> None:
        await self._close("fail", message, f"  [red]{EMOJI_ERROR}[/red]")

    async def _close(self, state: str, message: str, prefix: str) -> None:
        if self.is_closed:
            return
        self.state = state
        self.message = message
        self.step.reporter.record(self.step.title, f"task-{state}", message, self.description)
        self.step.reporter.console.print(f"{prefix} {escape(message)}")

    async def __aenter__(self) -> 'ReportingTask':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc is not None:
            await self.fail(str(exc) or exc_type.__name__)
        else:
            await self.complete()
        return False


class ReportingStep:
    """A reporting scope for one pipeline step"""

    def __init__(self, reporter: 'ActivityReporter', title: str):
        self.reporter = reporter
        self.title = title
        self.tasks: List[ReportingTask] = []
        self.state: Optional[str] = None
        self.message: str = ""

    @property
    def is_closed(self) -> bool:
        return self.state is not None

    async def create_task(self, description: str) -> ReportingTask:
        task = ReportingTask(self, description)
        self.tasks.append(task)
        self.reporter.record(self.title, "task-start", description, description)
        self.reporter.console.print(f"  [cyan]{EMOJI_ARROW}[/cyan] {escape(description)}")
        return task

    async def complete(self, message: Optional[str] = None) -> None:
        await self._close("complete", message or "Done", f"[green]{EMOJI_SUCCESS}[/green]")

    async def warn(self, message: str) -> None:
        await self._close("warn", message, f"[yellow]{EMOJI_WARNING}[/yellow]")

    async def fail(self, message: str) -> None:
        await self._close("fail", message, f"[red]{EMOJI_ERROR}[/red]")

    async def _close(self, state: str, message: str, prefix: str) -> None:
        if self.is_closed:
            return

        # Tasks left open are finished with the step
        for task in self.tasks:
            if not task.is_closed:
                if state == "fail":
                    await task.fail(message)
                else:
                    await task.complete()

        self.state = state
        self.message = message
        self.reporter.record(self.title, f"step-{state}", message)
        self.reporter.console.print(f"{prefix} [bold]{escape(self.title)}[/bold]: {escape(message)}")

    async def __aenter__(self) -> 'ReportingStep':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc is not None:
            await self.fail(str(exc) or exc_type.__name__)
        else:
            await self.complete()
        return False


class ActivityReporter:
    """Renders pipeline activity to a rich console and records events"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.events: List[ReportEvent] = []

    def record(self, step: str, kind: str, message: str = "", task: Optional[str] = None) -> None:
        self.events.append(ReportEvent(step=step, kind=kind, message=message, task=task))

    async def create_step(self, title: str) -> ReportingStep:
        """Open a reporting scope for a step"""
        self.record(title, "step-start")
        self.console.print(f"\n[bold blue]{escape(title)}[/bold blue]")
        return ReportingStep(self, title)

    def events_for(self, step: str) -> List[ReportEvent]:
        return [e for e in self.events if e.step == step]
