# netlify_deploy/core/executor.py
"""Deploy command execution"""

import asyncio
import logging
from typing import Optional

from .argument_builder import CliArgs
from .process import ProcessRunner
from .reporting import ReportingTask
from .result_extractor import ExtractedResult, get_extractor
from .state_store import StateStore
from ..api.exceptions import DeployProcessError, OutputParseError
from ..constants import (
    MSG_DEPLOY_EXIT_CODE,
    MSG_DEPLOY_LOGS,
    MSG_DEPLOY_SUCCESS,
    MSG_DEPLOY_URL,
)
from ..models.result import DeployOutcome, OperationStatus
from ..models.target import DeploymentTarget

logger = logging.getLogger(__name__)


def format_success_message(deploy_url: Optional[str], logs_url: Optional[str]) -> str:
    """Build the message shown for a successful deploy"""
    message = MSG_DEPLOY_SUCCESS
    if deploy_url:
        message += MSG_DEPLOY_URL.format(url=deploy_url)
    if logs_url:
        message += MSG_DEPLOY_LOGS.format(logs=logs_url)
    return message.strip()


class DeploymentExecutor:
    """Runs `ntl deploy` and interprets its result"""

    def __init__(self, runner: Optional[ProcessRunner] = None,
                 state_store: Optional[StateStore] = None):
        self.runner = runner or ProcessRunner()
        self.state_store = state_store

    async def execute(self,
                      tool_path: str,
                      cli_args: CliArgs,
                      working_directory: str,
                      target: DeploymentTarget,
                      reporting_task: Optional[ReportingTask] = None,
                      cancel_event: Optional[asyncio.Event] = None) -> DeployOutcome:
        """
        Execute a deploy

        Args:
            tool_path: Path (or bare name) of the CLI executable
            cli_args: Raw and redacted arguments
            working_directory: Directory the CLI runs in
            target: Deployment target
            reporting_task: Receives streamed output lines
            cancel_event: Set to cancel the running deploy

        Returns:
            Successful DeployOutcome

        Raises:
            DeployProcessError: On non-zero exit
            DeployCancelledError: If cancelled
            ProcessLaunchError: If the CLI cannot be started
        """
        logger.info(f"Running: {cli_args.display(tool_path)}")

        async def on_stdout(line: str) -> None:
            logger.debug(f"[{target.name}] {line}")
            if reporting_task is not None:
                await reporting_task.update(line)

        async def on_stderr(line: str) -> None:
            logger.debug(f"[{target.name}] stderr: {line}")
            if reporting_task is not None:
                await reporting_task.update(line)

        execution = await self.runner.run(
            tool_path,
            cli_args.raw,
            cwd=working_directory,
            on_stdout=on_stdout,
            on_stderr=on_stderr,
            cancel_event=cancel_event,
        )

        if not execution.is_success:
            stderr = (execution.stderr or "").strip()
            message = stderr or MSG_DEPLOY_EXIT_CODE.format(exit_code=execution.exit_code)
            raise DeployProcessError(message, execution.exit_code, stderr)

        extracted = self._extract(execution.stdout, target)

        if extracted.site_id:
            await self._persist_site_id(target, extracted.site_id)

        return DeployOutcome(
            target_name=target.name,
            status=OperationStatus.SUCCESS,
            message=format_success_message(extracted.deploy_url, extracted.logs_url),
            deploy_url=extracted.deploy_url,
            logs_url=extracted.logs_url,
            site=extracted.site,
            execution=execution,
        )

    def _extract(self, stdout: str, target: DeploymentTarget) -> ExtractedResult:
        extractor = get_extractor(target.options.json)
        try:
            return extractor.extract(stdout)
        except OutputParseError as e:
            logger.warning(f"Deploy for '{target.name}' succeeded but its output was not understood: {e}")
            return ExtractedResult()

    async def _persist_site_id(self, target: DeploymentTarget, site_id: str) -> None:
        target.site_id = site_id

        if self.state_store is None:
            return

        if await self.state_store.upsert(target.state_key, site_id):
            await self.state_store.flush()
            logger.info(f"Saved site id for '{target.name}'")
