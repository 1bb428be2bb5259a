"""End-to-end pipeline tests with a fake process runner"""

import asyncio
import logging
from pathlib import Path

import pytest

from netlify_deploy.api import Deployer
from netlify_deploy.constants import StepName
from netlify_deploy.models import ExecutionResult, OperationStatus, StaticSecret, StepStatus
from netlify_deploy.services.pipeline_service import PipelineOrchestrator

from tests.conftest import SITE_GUID, FakeInteraction, make_executable

DEPLOY_STDOUT = (
    "Website draft URL: https://abc--site123.netlify.app\n"
    "Build logs: https://app.netlify.com/sites/site123/deploys/abc\n"
)


@pytest.fixture
def installed_tool(bin_dir):
    return make_executable(bin_dir / "ntl")


def add_targets(config, make_target, *names, **options):
    for name in names:
        target = make_target(name, **options)
        target.auth_token = StaticSecret(f"token-{name}-0123456789")
        config.targets[name] = target


def orchestrator(config, runner, locator, reporter, environ, **kwargs):
    return PipelineOrchestrator(
        config, runner=runner, locator=locator, reporter=reporter, environ=environ, **kwargs
    )


class TestPipeline:
    """Full pipeline runs"""

    @pytest.mark.asyncio
    async def test_happy_path(self, config, make_target, runner, locator, reporter,
                              environ, installed_tool, state_store):
        add_targets(config, make_target, "web", site="site-web")
        runner.on("deploy", stdout=DEPLOY_STDOUT)

        result = await orchestrator(config, runner, locator, reporter, environ).run()

        assert result.success
        assert list(result.steps) == [
            StepName.CHECK_CLI,
            StepName.INSTALL_CLI,
            StepName.AUTHENTICATE_CLI,
            StepName.RESOLVE_SITE_ID,
            StepName.DEPLOY,
        ]
        outcome = result.get_outcome("web")
        assert outcome.deploy_url == "https://abc--site123.netlify.app"
        assert runner.calls_for("install") == []

        deploy_call = runner.calls_for("deploy")[0]
        assert deploy_call.command == str(installed_tool)
        expected_dir = (Path(config.targets["web"].working_dir) / "dist").resolve()
        assert deploy_call.args[1:3] == ["--dir", str(expected_dir)]
        assert "--auth" in deploy_call.args
        assert await state_store.get("web") == "site-web"

    @pytest.mark.asyncio
    async def test_installs_missing_tool(self, config, make_target, runner, locator,
                                         reporter, environ, bin_dir):
        add_targets(config, make_target, "web", site="site-web")

        def install(command, args, cwd):
            make_executable(bin_dir / "ntl")
            return ExecutionResult(0, "added 1 package")

        runner.on("install", handler=install)

        result = await orchestrator(config, runner, locator, reporter, environ).run()

        assert result.success
        install_call = runner.calls_for("install")[0]
        assert install_call.command == "npm"
        assert install_call.args == ["install", "-g", "netlify-cli"]
        assert runner.calls_for("deploy")[0].command == str(bin_dir / "ntl")

    @pytest.mark.asyncio
    async def test_install_failure_skips_later_steps(self, config, make_target, runner,
                                                     locator, reporter, environ):
        add_targets(config, make_target, "web", site="site-web")
        runner.on("install", exit_code=1)

        result = await orchestrator(config, runner, locator, reporter, environ).run()

        assert not result.success
        assert result.steps[StepName.INSTALL_CLI].status == StepStatus.FAILED
        assert result.steps[StepName.INSTALL_CLI].error == "npm install exited with code 1"
        for name in (StepName.AUTHENTICATE_CLI, StepName.RESOLVE_SITE_ID, StepName.DEPLOY):
            assert result.steps[name].status == StepStatus.SKIPPED
        assert result.get_outcome("web").status == OperationStatus.SKIPPED
        assert runner.calls_for("deploy") == []

    @pytest.mark.asyncio
    async def test_explicit_token_skips_login(self, config, make_target, runner, locator,
                                              reporter, environ, installed_tool, caplog):
        add_targets(config, make_target, "web", site="site-web")

        with caplog.at_level(logging.INFO):
            result = await orchestrator(config, runner, locator, reporter, environ).run()

        assert result.success
        assert runner.calls_for("login") == []
        assert "Using provided Netlify auth token for 'web', skipping login step." in caplog.text
        assert "token-web-0123456789" not in caplog.text

    @pytest.mark.asyncio
    async def test_login_runs_once_for_all_targets(self, config, make_target, runner,
                                                   locator, reporter, environ, installed_tool):
        for name in ("web", "docs"):
            config.targets[name] = make_target(name, site=f"site-{name}")

        result = await orchestrator(config, runner, locator, reporter, environ).run()

        assert result.success
        assert len(runner.calls_for("login")) == 1
        assert len(runner.calls_for("deploy")) == 2

    @pytest.mark.asyncio
    async def test_login_failure(self, config, make_target, runner, locator, reporter,
                                 environ, installed_tool):
        config.targets["web"] = make_target("web", site="site-web")
        runner.on("login", exit_code=1, stderr="Login cancelled")

        result = await orchestrator(config, runner, locator, reporter, environ).run()

        assert result.steps[StepName.AUTHENTICATE_CLI].status == StepStatus.FAILED
        assert result.steps[StepName.AUTHENTICATE_CLI].error == "Login cancelled"
        assert result.steps[StepName.DEPLOY].status == StepStatus.SKIPPED
        assert runner.calls_for("deploy") == []

    @pytest.mark.asyncio
    async def test_login_failure_spares_targets_with_tokens(self, config, make_target, runner,
                                                           locator, reporter, environ,
                                                           installed_tool):
        add_targets(config, make_target, "withtoken", site="site-1")
        config.targets["needslogin"] = make_target("needslogin", site="site-2")
        runner.on("login", exit_code=1, stderr="Login cancelled")

        result = await orchestrator(config, runner, locator, reporter, environ).run()

        assert not result.success
        assert result.steps[StepName.AUTHENTICATE_CLI].status == StepStatus.SUCCEEDED
        assert result.steps[StepName.DEPLOY].status == StepStatus.SUCCEEDED
        assert result.get_outcome("withtoken").status == OperationStatus.SUCCESS
        needs_login = result.get_outcome("needslogin")
        assert needs_login.status == OperationStatus.FAILED
        assert needs_login.error == "Login cancelled"

        deploy_calls = runner.calls_for("deploy")
        assert len(deploy_calls) == 1
        assert "site-1" in deploy_calls[0].args

    @pytest.mark.asyncio
    async def test_failed_target_does_not_stop_others(self, config, make_target, runner,
                                                      locator, reporter, environ,
                                                      installed_tool, caplog):
        add_targets(config, make_target, "web", "docs", site="site-1")
        runner.on("deploy", exit_code=2, stderr="Not authorized")
        runner.on("deploy", stdout=DEPLOY_STDOUT)

        with caplog.at_level(logging.ERROR):
            result = await orchestrator(config, runner, locator, reporter, environ).run()

        assert not result.success
        assert result.steps[StepName.DEPLOY].status == StepStatus.FAILED

        web = result.get_outcome("web")
        assert web.status == OperationStatus.FAILED
        assert web.error == "Not authorized"
        assert result.get_outcome("docs").status == OperationStatus.SUCCESS

        failures = [e for e in reporter.events if e.kind == "task-fail"]
        assert failures[0].message == "Not authorized"
        assert "Not authorized" in caplog.text

    @pytest.mark.asyncio
    async def test_prompted_site_id_is_remembered(self, config, make_target, runner, locator,
                                                  reporter, environ, installed_tool, state_store):
        add_targets(config, make_target, "web")
        interaction = FakeInteraction([SITE_GUID])

        first = await orchestrator(config, runner, locator, reporter, environ,
                                   interaction=interaction).run()

        assert first.success
        assert await state_store.get("web") == SITE_GUID
        assert SITE_GUID in runner.calls_for("deploy")[0].args

        config.targets["web"].site_id = None
        second = await orchestrator(config, runner, locator, reporter, environ,
                                    interaction=FakeInteraction([])).run()

        assert second.success
        assert SITE_GUID in runner.calls_for("deploy")[1].args

    @pytest.mark.asyncio
    async def test_non_interactive_config_never_prompts(self, config, make_target, runner,
                                                        locator, reporter, environ,
                                                        installed_tool):
        add_targets(config, make_target, "web")
        config.deploy.interactive = False
        interaction = FakeInteraction([SITE_GUID])

        result = await orchestrator(config, runner, locator, reporter, environ,
                                    interaction=interaction).run()

        assert result.success
        assert interaction.prompts == []
        assert "--site" not in runner.calls_for("deploy")[0].args

    @pytest.mark.asyncio
    async def test_parallel_deploys(self, config, make_target, runner, locator, reporter,
                                    environ, installed_tool):
        add_targets(config, make_target, "a", "b", "c", site="site-1")
        config.deploy.max_parallel = 3

        result = await orchestrator(config, runner, locator, reporter, environ).run()

        assert result.success
        assert sorted(o.target_name for o in result.outcomes) == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_cancel_event(self, config, make_target, runner, locator, reporter,
                                environ, installed_tool):
        add_targets(config, make_target, "web", site="site-1")
        cancel_event = asyncio.Event()
        cancel_event.set()

        result = await orchestrator(config, runner, locator, reporter, environ,
                                    cancel_event=cancel_event).run()

        assert result.cancelled
        assert not result.success
        assert result.steps[StepName.DEPLOY].status == StepStatus.CANCELLED
        assert result.get_outcome("web").status == OperationStatus.CANCELLED
        assert runner.calls_for("deploy") == []


class TestDeployer:
    """Public API"""

    def test_deploy_with_overrides(self, config, make_target, runner, environ, installed_tool):
        add_targets(config, make_target, "web", "docs", site="site-1")

        deployer = Deployer(config, runner=runner, environ=environ)
        result = deployer.deploy(targets=["docs"], prod=True, message="release 1")

        assert result.success
        assert [o.target_name for o in result.outcomes] == ["docs"]
        args = runner.calls_for("deploy")[0].args
        assert "--prod" in args
        assert args[args.index("--message") + 1] == "release 1"

    def test_unknown_target(self, config, make_target, runner, environ):
        add_targets(config, make_target, "web")

        with pytest.raises(ValueError):
            Deployer(config, runner=runner, environ=environ).deploy(targets=["nope"])


class TestCreateSite:
    """--create-site across runs"""

    @pytest.mark.asyncio
    async def test_second_run_reuses_created_site(self, config, make_target, runner, locator,
                                                  reporter, environ, installed_tool, state_store):
        runner.on("deploy", stdout=(
            '{"site_id": "%s", "site_name": "my-new-site", '
            '"deploy_url": "https://abc--my-new-site.netlify.app"}' % SITE_GUID
        ))

        add_targets(config, make_target, "web", create_site="my-new-site")
        first = await orchestrator(config, runner, locator, reporter, environ).run()

        assert first.success
        assert "--create-site" in runner.calls_for("deploy")[0].args
        assert await state_store.get("web") == SITE_GUID

        add_targets(config, make_target, "web", create_site="my-new-site")
        second = await orchestrator(config, runner, locator, reporter, environ).run()

        assert second.success
        args = runner.calls_for("deploy")[1].args
        assert "--create-site" not in args
        assert args[args.index("--site") + 1] == SITE_GUID
