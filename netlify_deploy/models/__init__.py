"""Data models for netlify-deploy"""

from .target import (
    DeployOptions,
    DeploymentTarget,
    SecretSource,
    StaticSecret,
    EnvironmentSecret,
    FileSecret,
    secret_from_config,
)
from .site import NetlifySite, NetlifySiteCapabilities
from .result import (
    OperationStatus,
    StepStatus,
    ToolLocation,
    ExecutionResult,
    StepResult,
    DeployOutcome,
    PipelineResult,
)
from .config import Config, ToolConfig, StateConfig, DeploySettings, CiConfig

__all__ = [
    "DeployOptions",
    "DeploymentTarget",
    "SecretSource",
    "StaticSecret",
    "EnvironmentSecret",
    "FileSecret",
    "secret_from_config",
    "NetlifySite",
    "NetlifySiteCapabilities",
    "OperationStatus",
    "StepStatus",
    "ToolLocation",
    "ExecutionResult",
    "StepResult",
    "DeployOutcome",
    "PipelineResult",
    "Config",
    "ToolConfig",
    "StateConfig",
    "DeploySettings",
    "CiConfig",
]
