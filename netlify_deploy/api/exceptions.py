"""Exception definitions for netlify-deploy API"""

from typing import Optional

from ..constants import ErrorCode


class NetlifyDeployError(Exception):
    """Base exception for netlify-deploy"""

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.error_code = error_code


class ToolNotFoundError(NetlifyDeployError):
    """External tool not found on the search path"""

    def __init__(self, tool_name: str):
        super().__init__(f"{tool_name} not found on PATH", ErrorCode.TOOL_NOT_FOUND)
        self.tool_name = tool_name


class InstallError(NetlifyDeployError):
    """Installing the external tool failed"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INSTALL_FAILED)


class AuthenticationError(NetlifyDeployError):
    """Interactive login failed"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.AUTHENTICATION_FAILED)


class DeployProcessError(NetlifyDeployError):
    """The deploy command exited with a non-zero code"""

    def __init__(self, message: str, exit_code: int, stderr: str = ""):
        super().__init__(message, ErrorCode.DEPLOY_PROCESS_FAILED)
        self.exit_code = exit_code
        self.stderr = stderr


class OutputParseError(NetlifyDeployError):
    """Structured output of the deploy command could not be parsed"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.OUTPUT_PARSE_FAILED)


class DeployCancelledError(NetlifyDeployError):
    """Operation cancelled before the external process finished"""

    def __init__(self, message: str = "Operation cancelled"):
        super().__init__(message, ErrorCode.DEPLOY_CANCELLED)


class StepGraphError(NetlifyDeployError):
    """Invalid pipeline step graph (unknown dependency or cycle)"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.STEP_GRAPH_INVALID)


class ConfigError(NetlifyDeployError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_FORMAT_ERROR)


class StateStoreError(NetlifyDeployError):
    """Persisted state could not be read or written"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.STATE_STORE_ERROR)


class ProcessLaunchError(NetlifyDeployError):
    """External process could not be started"""

    def __init__(self, command: str, reason: str):
        super().__init__(f"Failed to start '{command}': {reason}", ErrorCode.PROCESS_LAUNCH_FAILED)
        self.command = command
