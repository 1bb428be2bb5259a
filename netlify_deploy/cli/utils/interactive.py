"""Interactive utilities for CLI commands"""

import sys
from typing import Optional

from rich.console import Console
from rich.prompt import Prompt

from ...constants import MAX_PROMPT_ATTEMPTS
from ...core.interaction import InteractionService, Validator
from ...utils.async_utils import sync_to_async


class ConsoleInteractionService(InteractionService):
    """Prompts on the terminal with rich"""

    def __init__(self, console: Optional[Console] = None, max_attempts: int = MAX_PROMPT_ATTEMPTS):
        self.console = console or Console()
        self.max_attempts = max_attempts

    @property
    def is_available(self) -> bool:
        return sys.stdin is not None and sys.stdin.isatty()

    async def prompt_input(self,
                           title: str,
                           message: str,
                           label: str,
                           placeholder: Optional[str] = None,
                           validator: Optional[Validator] = None) -> Optional[str]:
        return await sync_to_async(self._ask)(title, message, label, placeholder, validator)

    def _ask(self, title, message, label, placeholder, validator) -> Optional[str]:
        self.console.print(f"\n[bold cyan]{title}[/bold cyan]")
        self.console.print(message)
        if placeholder:
            self.console.print(f"[dim]e.g. {placeholder}[/dim]")

        for _ in range(self.max_attempts):
            value = Prompt.ask(label, default="", show_default=False, console=self.console)
            value = value.strip()

            # Empty answer declines
            if not value:
                return None

            error = validator(value) if validator else None
            if error is None:
                return value

            self.console.print(f"[red]{error}[/red]")

        return None
