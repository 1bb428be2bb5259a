# netlify_deploy/services/pipeline_service.py
"""Deployment pipeline orchestration"""

import asyncio
import logging
from pathlib import Path
from typing import List, Mapping, Optional

from ..api.exceptions import DeployCancelledError, NetlifyDeployError
from ..constants import MSG_TOKEN_SKIP_LOGIN, StepName
from ..core.argument_builder import build_arguments
from ..core.credential_resolver import AuthenticationState, CredentialResolver
from ..core.executor import DeploymentExecutor
from ..core.installer import ToolInstaller, login, parse_tool_version
from ..core.interaction import InteractionService, NullInteractionService
from ..core.process import ProcessRunner
from ..core.reporting import ActivityReporter, ReportingStep
from ..core.site_resolver import SiteIdentityResolver
from ..core.state_store import StateStore
from ..core.step_graph import PipelineStep, PipelineStepGraph
from ..core.tool_locator import ToolLocator
from ..models.config import Config
from ..models.result import DeployOutcome, OperationStatus, PipelineResult, ToolLocation
from ..models.target import DeploymentTarget
from ..utils.async_utils import AsyncPool

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """Builds and runs the check → install → authenticate → resolve → deploy pipeline"""

    def __init__(self,
                 config: Config,
                 targets: Optional[List[DeploymentTarget]] = None,
                 runner: Optional[ProcessRunner] = None,
                 locator: Optional[ToolLocator] = None,
                 state_store: Optional[StateStore] = None,
                 interaction: Optional[InteractionService] = None,
                 reporter: Optional[ActivityReporter] = None,
                 environ: Optional[Mapping[str, str]] = None,
                 cancel_event: Optional[asyncio.Event] = None):
        """
        Initialize orchestrator

        Args:
            config: Project configuration
            targets: Targets to deploy (defaults to every configured target)
            runner: Process runner for external commands
            locator: Executable locator
            state_store: Persisted site ids (defaults to config.state.path)
            interaction: Prompt capability (defaults to none)
            reporter: Progress reporter
            environ: Environment mapping (defaults to os.environ)
            cancel_event: Set to cancel running deploys
        """
        self.config = config
        self.targets = list(targets) if targets is not None else config.select_targets()
        self.runner = runner or ProcessRunner()
        self.locator = locator or ToolLocator(environ)
        self.state_store = state_store or StateStore(config.state.path)
        self.interaction = interaction or NullInteractionService()
        self.reporter = reporter or ActivityReporter()
        self.environ = environ
        self.cancel_event = cancel_event

        if not config.deploy.interactive:
            self.interaction = NullInteractionService()

        self.installer = ToolInstaller(config.tool, self.runner, self.locator)
        self.credentials = CredentialResolver(environ)
        self.auth_state = AuthenticationState()
        self.site_resolver = SiteIdentityResolver(
            self.state_store,
            self.interaction,
            environ,
            config.ci.extra_variables,
        )
        self.executor = DeploymentExecutor(self.runner, self.state_store)

        self.tool_location: ToolLocation = ToolLocation.not_found(config.tool.command)
        self.outcomes: List[DeployOutcome] = []

    def build_graph(self) -> PipelineStepGraph:
        """Create the step graph for this run"""
        graph = PipelineStepGraph()

        check = graph.add_step(PipelineStep(
            StepName.CHECK_CLI, self._check_cli,
            title=StepName.friendly_name(StepName.CHECK_CLI)))
        install = graph.add_step(PipelineStep(
            StepName.INSTALL_CLI, self._install_cli,
            title=StepName.friendly_name(StepName.INSTALL_CLI)).depends_on(check))
        authenticate = graph.add_step(PipelineStep(
            StepName.AUTHENTICATE_CLI, self._authenticate,
            title=StepName.friendly_name(StepName.AUTHENTICATE_CLI)).depends_on(install))
        resolve = graph.add_step(PipelineStep(
            StepName.RESOLVE_SITE_ID, self._resolve_sites,
            title=StepName.friendly_name(StepName.RESOLVE_SITE_ID)).depends_on(authenticate))
        graph.add_step(PipelineStep(
            StepName.DEPLOY, self._deploy,
            title=StepName.friendly_name(StepName.DEPLOY)).depends_on(resolve))

        return graph

    async def run(self) -> PipelineResult:
        """Run the pipeline and collect results"""
        result = PipelineResult()
        self.outcomes = []

        graph = self.build_graph()
        result.steps = await graph.run(self.reporter)

        deployed = {o.target_name for o in self.outcomes}
        for target in self.targets:
            if target.name not in deployed:
                self.outcomes.append(DeployOutcome(
                    target_name=target.name,
                    status=OperationStatus.SKIPPED,
                    message="Not deployed: an earlier step did not succeed",
                ))

        result.outcomes = list(self.outcomes)
        result.complete()
        return result

    @property
    def tool_command(self) -> str:
        return self.tool_location.command or self.config.tool.command

    async def _check_cli(self, step: ReportingStep) -> None:
        command = self.config.tool.command

        async with await step.create_task(f"Locating {command}") as task:
            self.tool_location = self.locator.locate(command)

            if not self.tool_location.found:
                logger.warning(f"{command} not found on PATH")
                await task.warn(f"{command} not found on PATH")
                step.message = "Netlify CLI not installed"
                return

            output = await self.installer.read_version(self.tool_location)
            version = parse_tool_version(output)
            found = f"Found {self.tool_location.path}"
            if version is not None:
                found += f" (version {version})"
            elif output:
                found += f" ({output})"
            await task.complete(found)
            step.message = "Netlify CLI available"

    async def _install_cli(self, step: ReportingStep) -> None:
        async with await step.create_task(f"Installing {self.config.tool.package}") as task:
            if self.tool_location.found:
                await task.complete("Skipped: already installed")
                step.message = "Already installed"
                return

            self.tool_location = await self.installer.install(task)
            await task.complete(f"Installed {self.config.tool.package}")
            step.message = "Installed"

    async def _authenticate(self, step: ReportingStep) -> None:
        needs_login = []

        for target in self.targets:
            token = await self.credentials.resolve(target)
            if token is None:
                needs_login.append(target)
                continue

            task = await step.create_task(f"Auth token for '{target.name}'")
            await task.complete(MSG_TOKEN_SKIP_LOGIN.format(target=target.name))

        if needs_login:
            names = ", ".join(t.name for t in needs_login)
            try:
                async with await step.create_task(f"Logging in to Netlify ({names})") as task:
                    performed = await self.auth_state.run_login_once(
                        lambda: login(self.runner, self.tool_command, task)
                    )
                    await task.complete("Logged in" if performed else "Already logged in")
            except NetlifyDeployError as e:
                # Fatal only when no target brought its own token
                if len(needs_login) == len(self.targets):
                    raise
                logger.error(f"Netlify login failed, not deploying {names}: {e}")
                for target in needs_login:
                    self.outcomes.append(DeployOutcome(
                        target.name, OperationStatus.FAILED, f"Login failed: {e}", error=str(e)
                    ))
                await step.warn(f"Login failed; {len(needs_login)} target(s) will not be deployed")
                return

        step.message = "Authenticated"

    @property
    def active_targets(self) -> List[DeploymentTarget]:
        """Targets that have not already failed"""
        finished = {o.target_name for o in self.outcomes}
        return [t for t in self.targets if t.name not in finished]

    async def _resolve_sites(self, step: ReportingStep) -> None:
        for target in self.active_targets:
            async with await step.create_task(f"Site id for '{target.name}'") as task:
                resolution = await self.site_resolver.resolve(target)
                if resolution.resolved:
                    await task.complete(f"Using site id from {resolution.source.value}")
                else:
                    await task.warn(f"No site id ({resolution.source.value})")

        step.message = "Site ids resolved"

    async def _deploy(self, step: ReportingStep) -> None:
        pool = AsyncPool(self.config.deploy.max_parallel)
        for target in self.active_targets:
            await pool.submit(self.deploy_target(target, step))

        outcomes = []
        for outcome in await pool.wait_all():
            if isinstance(outcome, BaseException):
                raise outcome
            outcomes.append(outcome)
        self.outcomes.extend(outcomes)

        cancelled = [o for o in outcomes if o.status == OperationStatus.CANCELLED]
        failed = [o for o in outcomes if o.status == OperationStatus.FAILED]

        if cancelled:
            raise DeployCancelledError(f"Deploy cancelled for {len(cancelled)} target(s)")
        if failed:
            raise NetlifyDeployError(
                f"{len(failed)} of {len(outcomes)} target(s) failed to deploy: "
                f"{', '.join(o.target_name for o in failed)}"
            )

        step.message = f"Deployed {len(outcomes)} target(s)"

    def resolve_build_dir(self, target: DeploymentTarget) -> str:
        """Absolute build directory for a target"""
        build_dir = Path(target.options.dir or target.build_dir)
        if not build_dir.is_absolute():
            build_dir = Path(target.working_dir) / build_dir
        return str(build_dir.resolve())

    async def deploy_target(self, target: DeploymentTarget, step: ReportingStep) -> DeployOutcome:
        """Deploy one target, converting failures into outcomes"""
        environment = target.options.describe_environment()
        task = await step.create_task(f"Deploying '{target.name}' ({environment})")

        if self.cancel_event is not None and self.cancel_event.is_set():
            await task.fail("Cancelled")
            return DeployOutcome(target.name, OperationStatus.CANCELLED, "Cancelled")

        cli_args = build_arguments(target.options, self.resolve_build_dir(target))

        try:
            outcome = await self.executor.execute(
                self.tool_command,
                cli_args,
                target.working_dir,
                target,
                reporting_task=task,
                cancel_event=self.cancel_event,
            )
        except DeployCancelledError as e:
            logger.warning(f"Deploy of '{target.name}' cancelled")
            await task.fail(str(e))
            return DeployOutcome(target.name, OperationStatus.CANCELLED, str(e), error=str(e))
        except Exception as e:
            logger.error(f"Deploy of '{target.name}' failed: {e}")
            await task.fail(str(e))
            return DeployOutcome(target.name, OperationStatus.FAILED, str(e), error=str(e))

        await task.complete(outcome.message)
        return outcome
