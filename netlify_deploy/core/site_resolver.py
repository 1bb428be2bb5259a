# netlify_deploy/core/site_resolver.py
"""Site identity resolution"""

import json
import logging
import os
from pathlib import Path
from typing import Iterable, Mapping, NamedTuple, Optional

import aiofiles

from .interaction import InteractionService, is_interaction_available, validate_guid
from .state_store import StateStore
from ..constants import (
    ENV_SITE_ID,
    NETLIFY_STATE_FILE_PATH,
    PROMPT_SITE_ID_LABEL,
    PROMPT_SITE_ID_MESSAGE,
    PROMPT_SITE_ID_PLACEHOLDER,
    PROMPT_SITE_ID_TITLE,
    SiteSource,
)
from ..models.target import DeploymentTarget

logger = logging.getLogger(__name__)


class SiteResolution(NamedTuple):
    """Resolved site id and where it came from"""
    site_id: Optional[str]
    source: SiteSource

    @property
    def resolved(self) -> bool:
        return self.site_id is not None


class SiteIdentityResolver:
    """Determines which Netlify site a target deploys to

    Sources are tried in order: persisted state, configured options, the
    CLI's own `.netlify/state.json`, an interactive prompt and finally
    the NETLIFY_SITE_ID environment variable. Anything found outside the
    persisted state is written back so the next run is non-interactive.
    """

    def __init__(self,
                 state_store: StateStore,
                 interaction: Optional[InteractionService] = None,
                 environ: Optional[Mapping[str, str]] = None,
                 extra_ci_variables: Optional[Iterable[str]] = None):
        self.state_store = state_store
        self.interaction = interaction
        self._environ = environ
        self.extra_ci_variables = list(extra_ci_variables or [])

    @property
    def environ(self) -> Mapping[str, str]:
        return self._environ if self._environ is not None else os.environ

    async def resolve(self, target: DeploymentTarget) -> SiteResolution:
        """
        Resolve and bind the site id for a target

        Args:
            target: Deployment target; its options.site is updated

        Returns:
            SiteResolution
        """
        stored = await self.state_store.get(target.state_key)
        if stored:
            if target.options.create_site:
                logger.info(
                    f"Site '{target.options.create_site}' for '{target.name}' was created by an "
                    f"earlier run; deploying to it instead of creating another"
                )
                target.options.create_site = None
            target.site_id = stored
            logger.debug(f"Site id for '{target.name}' found in state")
            return SiteResolution(stored, SiteSource.STATE)

        if target.options.create_site:
            # The CLI creates the site; JSON output carries the new id back
            target.options.json = True
            logger.info(f"Target '{target.name}' creates site '{target.options.create_site}'")
            return SiteResolution(None, SiteSource.CREATE_SITE)

        resolution = await self._discover(target)

        if resolution.site_id is None:
            logger.warning(
                f"No Netlify site id for '{target.name}'; the CLI will decide which site to use"
            )
            return resolution

        target.site_id = resolution.site_id
        await self.state_store.upsert(target.state_key, resolution.site_id)
        await self.state_store.flush()

        logger.info(f"Site id for '{target.name}' resolved from {resolution.source.value}")
        return resolution

    async def _discover(self, target: DeploymentTarget) -> SiteResolution:
        configured = (target.options.site or "").strip()
        if configured:
            return SiteResolution(configured, SiteSource.CONFIGURED)

        local = await self.read_local_state(target.working_dir)
        if local:
            return SiteResolution(local, SiteSource.LOCAL_STATE)

        prompted = await self._prompt(target)
        if prompted:
            return SiteResolution(prompted, SiteSource.PROMPT)

        env_value = (self.environ.get(ENV_SITE_ID) or "").strip()
        if env_value:
            return SiteResolution(env_value, SiteSource.ENVIRONMENT)

        return SiteResolution(None, SiteSource.NONE)

    async def read_local_state(self, working_dir: str) -> Optional[str]:
        """Read `siteId` from the CLI's local state file"""
        state_file = Path(working_dir) / NETLIFY_STATE_FILE_PATH
        if not state_file.is_file():
            return None

        try:
            async with aiofiles.open(state_file, 'r', encoding='utf-8') as f:
                data = json.loads(await f.read())
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable {state_file}: {e}")
            return None

        if not isinstance(data, dict):
            return None

        site_id = data.get("siteId")
        if isinstance(site_id, str) and site_id.strip():
            return site_id.strip()

        return None

    async def _prompt(self, target: DeploymentTarget) -> Optional[str]:
        if not is_interaction_available(self.interaction, self.environ, self.extra_ci_variables):
            return None

        value = await self.interaction.prompt_input(
            title=PROMPT_SITE_ID_TITLE,
            message=PROMPT_SITE_ID_MESSAGE.format(target=target.name),
            label=PROMPT_SITE_ID_LABEL,
            placeholder=PROMPT_SITE_ID_PLACEHOLDER,
            validator=validate_guid,
        )

        if not value or validate_guid(value) is not None:
            return None

        return value.strip()
