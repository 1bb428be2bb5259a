"""Authentication token resolution"""

import asyncio
import logging
import os
from typing import Awaitable, Callable, Mapping, Optional

from ..constants import ENV_AUTH_TOKEN, MSG_TOKEN_SKIP_LOGIN
from ..models.target import DeploymentTarget

logger = logging.getLogger(__name__)


class CredentialResolver:
    """Finds a non-interactive auth token for a target"""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return self._environ if self._environ is not None else os.environ

    async def find_token(self, target: DeploymentTarget) -> Optional[str]:
        """Look up a token without touching the target"""
        if target.auth_token is not None:
            value = await target.auth_token.get_value()
            if value and value.strip():
                return value.strip()

        value = self.environ.get(ENV_AUTH_TOKEN)
        if value and value.strip():
            return value.strip()

        return None

    async def resolve(self, target: DeploymentTarget) -> Optional[str]:
        """
        Resolve the token and bind it to the target's deploy options

        Args:
            target: Deployment target

        Returns:
            The token, or None when interactive login is required
        """
        token = await self.find_token(target)
        if token is None:
            return None

        target.options.auth = token
        logger.info(MSG_TOKEN_SKIP_LOGIN.format(target=target.name))
        return token


class AuthenticationState:
    """Shared login state for a pipeline run"""

    def __init__(self):
        self._lock = asyncio.Lock()
        self.logged_in = False

    async def run_login_once(self, login: Callable[[], Awaitable[None]]) -> bool:
        """
        Run the login callable unless a previous call succeeded

        Args:
            login: Coroutine factory performing the login; raises on failure

        Returns:
            True if this call performed the login
        """
        async with self._lock:
            if self.logged_in:
                return False

            await login()
            self.logged_in = True
            return True
