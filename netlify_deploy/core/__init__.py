"""Core functionality for netlify-deploy"""

from .tool_locator import ToolLocator
from .argument_builder import CliArgs, build_arguments, redact
from .ci_detector import is_running_in_ci, detect_ci_variable
from .credential_resolver import CredentialResolver, AuthenticationState
from .state_store import StateStore
from .interaction import InteractionService, NullInteractionService, validate_guid
from .site_resolver import SiteIdentityResolver, SiteResolution
from .process import ProcessRunner
from .result_extractor import JsonResultExtractor, PatternResultExtractor
from .executor import DeploymentExecutor
from .installer import ToolInstaller
from .reporting import ActivityReporter, ReportingStep, ReportingTask
from .step_graph import PipelineStep, PipelineStepGraph

__all__ = [
    "ToolLocator",
    "CliArgs",
    "build_arguments",
    "redact",
    "is_running_in_ci",
    "detect_ci_variable",
    "CredentialResolver",
    "AuthenticationState",
    "StateStore",
    "InteractionService",
    "NullInteractionService",
    "validate_guid",
    "SiteIdentityResolver",
    "SiteResolution",
    "ProcessRunner",
    "JsonResultExtractor",
    "PatternResultExtractor",
    "DeploymentExecutor",
    "ToolInstaller",
    "ActivityReporter",
    "ReportingStep",
    "ReportingTask",
    "PipelineStep",
    "PipelineStepGraph",
]
