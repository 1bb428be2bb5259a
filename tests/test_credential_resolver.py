"""Credential resolution tests"""

import asyncio
import logging

import pytest

from netlify_deploy.core.credential_resolver import AuthenticationState, CredentialResolver
from netlify_deploy.models import EnvironmentSecret, FileSecret, StaticSecret


class TestCredentialResolver:
    """Token lookup order"""

    @pytest.mark.asyncio
    async def test_explicit_token(self, make_target):
        target = make_target()
        target.auth_token = StaticSecret("explicit-token")

        token = await CredentialResolver({}).resolve(target)

        assert token == "explicit-token"
        assert target.options.auth == "explicit-token"

    @pytest.mark.asyncio
    async def test_explicit_token_beats_environment(self, make_target):
        target = make_target()
        target.auth_token = StaticSecret("explicit-token")

        resolver = CredentialResolver({"NETLIFY_AUTH_TOKEN": "env-token"})

        assert await resolver.resolve(target) == "explicit-token"

    @pytest.mark.asyncio
    async def test_environment_fallback(self, make_target):
        target = make_target()

        token = await CredentialResolver({"NETLIFY_AUTH_TOKEN": " env-token \n"}).resolve(target)

        assert token == "env-token"
        assert target.options.auth == "env-token"

    @pytest.mark.asyncio
    async def test_blank_values_require_login(self, make_target):
        target = make_target()
        target.auth_token = StaticSecret("   ")

        token = await CredentialResolver({"NETLIFY_AUTH_TOKEN": ""}).resolve(target)

        assert token is None
        assert target.options.auth is None

    @pytest.mark.asyncio
    async def test_log_line_never_contains_token(self, make_target, caplog):
        target = make_target()
        target.auth_token = StaticSecret("super-secret-value")

        with caplog.at_level(logging.INFO, logger="netlify_deploy"):
            await CredentialResolver({}).resolve(target)

        assert "skipping login step" in caplog.text
        assert "super-secret-value" not in caplog.text

    @pytest.mark.asyncio
    async def test_environment_secret(self, make_target):
        target = make_target()
        target.auth_token = EnvironmentSecret("MY_TOKEN", environ={"MY_TOKEN": "from-env"})

        assert await CredentialResolver({}).resolve(target) == "from-env"

    @pytest.mark.asyncio
    async def test_file_secret(self, make_target, tmp_path):
        token_file = tmp_path / "token"
        token_file.write_text("from-file\n")
        target = make_target()
        target.auth_token = FileSecret(token_file)

        assert await CredentialResolver({}).resolve(target) == "from-file"

    @pytest.mark.asyncio
    async def test_missing_file_secret(self, make_target, tmp_path):
        target = make_target()
        target.auth_token = FileSecret(tmp_path / "missing")

        assert await CredentialResolver({}).resolve(target) is None


class TestAuthenticationState:
    """Single login per run"""

    @pytest.mark.asyncio
    async def test_login_runs_once_under_concurrency(self):
        state = AuthenticationState()
        calls = []

        async def login():
            calls.append(1)
            await asyncio.sleep(0.01)

        results = await asyncio.gather(*(state.run_login_once(login) for _ in range(5)))

        assert len(calls) == 1
        assert results.count(True) == 1
        assert state.logged_in

    @pytest.mark.asyncio
    async def test_failed_login_can_be_retried(self):
        state = AuthenticationState()
        attempts = []

        async def failing():
            attempts.append(1)
            raise RuntimeError("denied")

        with pytest.raises(RuntimeError):
            await state.run_login_once(failing)

        assert not state.logged_in

        async def succeeding():
            attempts.append(1)

        assert await state.run_login_once(succeeding)
        assert len(attempts) == 2
