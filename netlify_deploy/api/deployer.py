"""Deployer API for Netlify deployments"""

import asyncio
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from rich.console import Console

from ..core.interaction import InteractionService
from ..core.process import ProcessRunner
from ..core.reporting import ActivityReporter
from ..models import Config, PipelineResult
from ..services.config_service import ConfigService
from ..services.pipeline_service import PipelineOrchestrator
from ..utils.async_utils import run_async


class Deployer:
    """Deployer class for deployment operations"""

    def __init__(self,
                 config: Config,
                 runner: Optional[ProcessRunner] = None,
                 interaction: Optional[InteractionService] = None,
                 reporter: Optional[ActivityReporter] = None,
                 environ: Optional[Mapping[str, str]] = None):
        """
        Initialize deployer

        Args:
            config: Loaded project configuration
            runner: Process runner (defaults to real subprocesses)
            interaction: Prompt capability (defaults to none)
            reporter: Progress reporter (defaults to a quiet console)
            environ: Environment mapping (defaults to os.environ)
        """
        self.config = config
        self.runner = runner
        self.interaction = interaction
        self.reporter = reporter or ActivityReporter(Console(quiet=True))
        self.environ = environ

    @classmethod
    def from_file(cls, config_path: Optional[Union[str, Path]] = None, **kwargs) -> 'Deployer':
        """Create a deployer from a configuration file"""
        config = ConfigService(config_path).load_config()
        return cls(config, **kwargs)

    async def deploy_async(self,
                           targets: Optional[List[str]] = None,
                           cancel_event: Optional[asyncio.Event] = None,
                           **options) -> PipelineResult:
        """
        Deploy targets

        Args:
            targets: Target names (defaults to every configured target)
            cancel_event: Set to cancel running deploys
            **options: Deploy option overrides applied to every target

        Returns:
            PipelineResult

        Raises:
            ValueError: On unknown target names or option keys
        """
        selected = self.config.select_targets(targets)

        if options:
            for target in selected:
                target.options.merge(options)

        orchestrator = PipelineOrchestrator(
            self.config,
            targets=selected,
            runner=self.runner,
            interaction=self.interaction,
            reporter=self.reporter,
            environ=self.environ,
            cancel_event=cancel_event,
        )
        return await orchestrator.run()

    def deploy(self, targets: Optional[List[str]] = None, **options) -> PipelineResult:
        """Synchronous wrapper around deploy_async"""
        return run_async(self.deploy_async(targets, **options))


def deploy(config_path: Optional[Union[str, Path]] = None,
           targets: Optional[List[str]] = None,
           **options: Any) -> PipelineResult:
    """
    Deploy configured targets

    This is a convenience function that loads the project configuration,
    creates a Deployer instance and runs the pipeline.

    Args:
        config_path: Configuration file (found automatically when omitted)
        targets: Target names (defaults to every configured target)
        **options: Deploy option overrides (e.g. prod=True, message="...")

    Returns:
        PipelineResult: Pipeline result

    Raises:
        ConfigError: If the configuration cannot be loaded
    """
    deployer = Deployer.from_file(config_path)
    return deployer.deploy(targets=targets, **options)
