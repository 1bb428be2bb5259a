"""CLI utilities"""

from .output import console, format_pipeline_result, format_state_table
from .interactive import ConsoleInteractionService

__all__ = [
    "console",
    "format_pipeline_result",
    "format_state_table",
    "ConsoleInteractionService",
]
