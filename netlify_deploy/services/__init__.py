# netlify_deploy/services/__init__.py
"""Business logic services for netlify-deploy"""

from .config_service import ConfigService, find_config_file
from .pipeline_service import PipelineOrchestrator

__all__ = [
    "ConfigService",
    "find_config_file",
    "PipelineOrchestrator",
]
