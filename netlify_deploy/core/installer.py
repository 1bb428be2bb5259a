"""Netlify CLI installation and login"""

import logging
import re
from typing import Optional

from packaging.version import InvalidVersion, Version, parse

from .process import ProcessRunner
from .reporting import ReportingTask
from .tool_locator import ToolLocator
from ..api.exceptions import AuthenticationError, InstallError, ProcessLaunchError
from ..constants import LOGIN_VERB, MSG_INSTALL_EXIT_CODE
from ..models.config import ToolConfig
from ..models.result import ExecutionResult, ToolLocation

logger = logging.getLogger(__name__)

TOOL_VERSION_PATTERN = re.compile(r"(?:^|[/\s])v?(?P<version>\d+\.\d+(?:\.\d+)?)(?=\s|$)")


class ToolInstaller:
    """Installs the CLI with the configured package manager"""

    def __init__(self, tool: ToolConfig,
                 runner: Optional[ProcessRunner] = None,
                 locator: Optional[ToolLocator] = None):
        self.tool = tool
        self.runner = runner or ProcessRunner()
        self.locator = locator or ToolLocator()

    async def install(self, task: Optional[ReportingTask] = None) -> ToolLocation:
        """
        Install the CLI globally

        Args:
            task: Reporting task receiving stdout lines

        Returns:
            Location of the CLI after installation (bare-name fallback
            when it is still not on PATH)

        Raises:
            InstallError: If the package manager fails
        """
        manager = self.locator.locate(self.tool.package_manager).command

        async def on_stdout(line: str) -> None:
            if task is not None:
                await task.update(line)

        def on_stderr(line: str) -> None:
            logger.warning(f"{self.tool.package_manager}: {line}")

        logger.info(f"Installing {self.tool.package} with {self.tool.package_manager}")

        result = await self.runner.run(
            manager,
            self.tool.install_arguments,
            on_stdout=on_stdout,
            on_stderr=on_stderr,
        )

        if not result.is_success:
            stderr = (result.stderr or "").strip()
            raise InstallError(stderr or MSG_INSTALL_EXIT_CODE.format(
                package_manager=self.tool.package_manager,
                exit_code=result.exit_code,
            ))

        location = self.locator.locate(self.tool.command)
        if not location.found:
            logger.warning(
                f"{self.tool.command} still not found on PATH after install; "
                f"relying on the system to resolve it"
            )
        return location

    async def read_version(self, location: ToolLocation) -> Optional[str]:
        """Return `<tool> --version` output, or None if it failed"""
        try:
            result = await self.runner.run(location.command, ["--version"])
        except ProcessLaunchError as e:
            logger.debug(f"Version check failed: {e}")
            return None

        if not result.is_success:
            return None
        return result.stdout.strip() or None


def parse_tool_version(output: Optional[str]) -> Optional[Version]:
    """
    Parse the version out of `--version` output

    Accepts both `netlify-cli/17.10.1 linux-x64 node-v20.9.0` and a bare
    `17.10.1`.
    """
    if not output:
        return None

    match = TOOL_VERSION_PATTERN.search(output)
    if not match:
        return None

    try:
        return parse(match.group("version"))
    except InvalidVersion:
        return None


async def login(runner: ProcessRunner, tool_command: str,
                task: Optional[ReportingTask] = None) -> ExecutionResult:
    """
    Run interactive `ntl login`

    Raises:
        AuthenticationError: On non-zero exit
    """
    async def on_output(line: str) -> None:
        logger.debug(f"login: {line}")
        if task is not None:
            await task.update(line)

    result = await runner.run(tool_command, [LOGIN_VERB], on_stdout=on_output, on_stderr=on_output)

    if not result.is_success:
        stderr = (result.stderr or "").strip()
        raise AuthenticationError(stderr or f"Netlify login exited with code {result.exit_code}")

    return result
