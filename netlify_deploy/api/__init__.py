# netlify_deploy/api/__init__.py
"""API layer for netlify-deploy"""

from .deployer import Deployer, deploy
from .exceptions import (
    NetlifyDeployError,
    ToolNotFoundError,
    InstallError,
    AuthenticationError,
    DeployProcessError,
    OutputParseError,
    DeployCancelledError,
    StepGraphError,
    ConfigError,
    StateStoreError,
    ProcessLaunchError,
)

__all__ = [
    # Main classes
    "Deployer",

    # Convenience functions
    "deploy",

    # Exceptions
    "NetlifyDeployError",
    "ToolNotFoundError",
    "InstallError",
    "AuthenticationError",
    "DeployProcessError",
    "OutputParseError",
    "DeployCancelledError",
    "StepGraphError",
    "ConfigError",
    "StateStoreError",
    "ProcessLaunchError",
]
