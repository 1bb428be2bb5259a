"""User interaction capability"""

import uuid
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Mapping, Optional

from .ci_detector import is_running_in_ci
from ..constants import PROMPT_SITE_ID_INVALID

# Returns an error message, or None when the value is acceptable
Validator = Callable[[str], Optional[str]]


class InteractionService(ABC):
    """Prompts the user for input"""

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Whether a user is able to answer prompts"""
        pass

    @abstractmethod
    async def prompt_input(self,
                           title: str,
                           message: str,
                           label: str,
                           placeholder: Optional[str] = None,
                           validator: Optional[Validator] = None) -> Optional[str]:
        """
        Ask for a single value

        Returns:
            Accepted value, or None if the user declined
        """
        pass


class NullInteractionService(InteractionService):
    """No user attached"""

    @property
    def is_available(self) -> bool:
        return False

    async def prompt_input(self, title, message, label, placeholder=None, validator=None):
        return None


def validate_guid(value: str) -> Optional[str]:
    """Validator accepting only GUID strings"""
    try:
        uuid.UUID(value.strip())
    except (ValueError, AttributeError):
        return PROMPT_SITE_ID_INVALID
    return None


def is_interaction_available(service: Optional[InteractionService],
                             environ: Optional[Mapping[str, str]] = None,
                             extra_ci_variables: Optional[Iterable[str]] = None) -> bool:
    """Prompting is allowed only with a live service outside CI"""
    if service is None or not service.is_available:
        return False
    return not is_running_in_ci(environ, extra_ci_variables)
