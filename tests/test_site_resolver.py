"""Site identity resolution tests"""

import json
import logging

import pytest

from netlify_deploy.constants import SiteSource
from netlify_deploy.core.site_resolver import SiteIdentityResolver
from netlify_deploy.core.state_store import StateStore

from tests.conftest import SITE_GUID, FakeInteraction


def write_local_state(site_dir, content):
    folder = site_dir / ".netlify"
    folder.mkdir(exist_ok=True)
    (folder / "state.json").write_text(content)


class TestSiteIdentityResolver:
    """Resolution order and persistence"""

    @pytest.mark.asyncio
    async def test_state_wins(self, state_store, make_target):
        await state_store.upsert("web", "from-state")
        target = make_target(site="configured")

        resolution = await SiteIdentityResolver(state_store, environ={}).resolve(target)

        assert resolution.source == SiteSource.STATE
        assert target.site_id == "from-state"

    @pytest.mark.asyncio
    async def test_configured_site_is_persisted(self, state_store, make_target):
        target = make_target(site="configured")

        resolution = await SiteIdentityResolver(state_store, environ={}).resolve(target)

        assert resolution.source == SiteSource.CONFIGURED
        assert await StateStore(state_store.path).get("web") == "configured"

    @pytest.mark.asyncio
    async def test_local_state_file(self, state_store, make_target, site_dir):
        write_local_state(site_dir, json.dumps({"siteId": "local-id"}))
        target = make_target()

        resolution = await SiteIdentityResolver(state_store, environ={}).resolve(target)

        assert resolution == ("local-id", SiteSource.LOCAL_STATE)
        assert target.site_id == "local-id"
        assert await state_store.get("web") == "local-id"

    @pytest.mark.asyncio
    async def test_malformed_local_state_is_skipped(self, state_store, make_target, site_dir, caplog):
        write_local_state(site_dir, "{broken")
        target = make_target()

        with caplog.at_level(logging.WARNING):
            resolution = await SiteIdentityResolver(state_store, environ={}).resolve(target)

        assert resolution.source == SiteSource.NONE
        assert "Ignoring unreadable" in caplog.text

    @pytest.mark.asyncio
    async def test_prompt(self, state_store, make_target):
        interaction = FakeInteraction(["not-a-guid", SITE_GUID])
        target = make_target()

        resolution = await SiteIdentityResolver(state_store, interaction, environ={}).resolve(target)

        assert resolution == (SITE_GUID, SiteSource.PROMPT)
        assert "'web'" in interaction.prompts[0]
        assert await state_store.get("web") == SITE_GUID

    @pytest.mark.asyncio
    async def test_no_prompt_in_ci(self, state_store, make_target):
        interaction = FakeInteraction([SITE_GUID])
        target = make_target()

        resolution = await SiteIdentityResolver(
            state_store, interaction, environ={"CI": "true"}
        ).resolve(target)

        assert resolution.source == SiteSource.NONE
        assert interaction.prompts == []

    @pytest.mark.asyncio
    async def test_declined_prompt_falls_back_to_environment(self, state_store, make_target):
        interaction = FakeInteraction([None])
        target = make_target()

        resolution = await SiteIdentityResolver(
            state_store, interaction, environ={"NETLIFY_SITE_ID": "env-site"}
        ).resolve(target)

        assert resolution == ("env-site", SiteSource.ENVIRONMENT)
        assert await state_store.get("web") == "env-site"

    @pytest.mark.asyncio
    async def test_unresolved_is_permissive(self, state_store, make_target, caplog):
        target = make_target()

        with caplog.at_level(logging.WARNING):
            resolution = await SiteIdentityResolver(state_store, environ={}).resolve(target)

        assert resolution == (None, SiteSource.NONE)
        assert target.site_id is None
        assert "No Netlify site id" in caplog.text
        assert await state_store.all() == {}

    @pytest.mark.asyncio
    async def test_create_site_without_stored_id(self, state_store, make_target):
        target = make_target(create_site="new-site")

        resolution = await SiteIdentityResolver(state_store, environ={"NETLIFY_SITE_ID": "env"}).resolve(target)

        assert resolution.source == SiteSource.CREATE_SITE
        assert target.options.json is True
        assert target.site_id is None

    @pytest.mark.asyncio
    async def test_stored_id_replaces_create_site(self, state_store, make_target):
        await state_store.upsert("web", "from-earlier-run")
        target = make_target(create_site="new-site")

        resolution = await SiteIdentityResolver(state_store, environ={}).resolve(target)

        assert resolution.source == SiteSource.STATE
        assert target.site_id == "from-earlier-run"
        assert target.options.create_site is None

    @pytest.mark.asyncio
    async def test_namespaced_state_key(self, state_store, make_target):
        target = make_target(site="configured")
        target.namespace = "acme"

        await SiteIdentityResolver(state_store, environ={}).resolve(target)

        assert await state_store.get("acme:web") == "configured"
        assert await state_store.get("web") is None

    @pytest.mark.asyncio
    async def test_second_resolution_does_not_prompt(self, state_store, make_target):
        interaction = FakeInteraction([SITE_GUID, SITE_GUID])
        resolver = SiteIdentityResolver(state_store, interaction, environ={})

        first = await resolver.resolve(make_target())
        second = await resolver.resolve(make_target())

        assert first.site_id == second.site_id == SITE_GUID
        assert second.source == SiteSource.STATE
        assert len(interaction.prompts) == 1

