"""Netlify Deploy - publish build output to Netlify through the Netlify CLI.

The pipeline locates (or installs) the CLI, authenticates, resolves the
site each target deploys to, runs `ntl deploy` and remembers the site ids
it learns so later runs need no prompting.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Core API
from .api.deployer import Deployer, deploy

# Data models
from .models import (
    Config,
    DeployOptions,
    DeploymentTarget,
    DeployOutcome,
    PipelineResult,
    NetlifySite,
    OperationStatus,
    StepStatus,
)

# Exceptions
from .api.exceptions import (
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
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Main classes
    "Deployer",

    # Core API functions
    "deploy",

    # Data models
    "Config",
    "DeployOptions",
    "DeploymentTarget",
    "DeployOutcome",
    "PipelineResult",
    "NetlifySite",
    "OperationStatus",
    "StepStatus",

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
