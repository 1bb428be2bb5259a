"""CLI commands"""

from . import deploy
from . import doctor
from . import state

__all__ = [
    "deploy",
    "doctor",
    "state",
]
