# netlify_deploy/cli/commands/doctor.py
"""System diagnostic command"""

import sys

import click
from rich import box
from rich.console import Console
from rich.table import Table

from ...api.exceptions import ConfigError, StateStoreError, ToolNotFoundError
from ...core.ci_detector import detect_ci_variable
from ...core.state_store import StateStore
from ...core.tool_locator import ToolLocator
from ...utils.async_utils import run_async

console = Console()


class DiagnosticCheck:
    """Base class for diagnostic checks"""

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self.passed = False
        self.message = ""
        self.fixes = []

    def run(self, ctx) -> 'DiagnosticCheck':
        """Run the diagnostic check"""
        raise NotImplementedError


class ToolCheck(DiagnosticCheck):
    """Check that an executable is on PATH"""

    def __init__(self, name: str, command: str, fix: str):
        super().__init__(name, f"Look up '{command}' on PATH")
        self.command = command
        self.fix_hint = fix

    def run(self, ctx):
        try:
            self.message = ToolLocator().require(self.command)
            self.passed = True
        except ToolNotFoundError as e:
            self.passed = False
            self.message = str(e)
            self.fixes = [self.fix_hint]
        return self


class ConfigCheck(DiagnosticCheck):
    """Check the project configuration"""

    def __init__(self):
        super().__init__("Configuration", "Load and validate the project configuration")

    def run(self, ctx):
        try:
            config = ctx.obj.config
        except ConfigError as e:
            self.passed = False
            self.message = str(e)
            self.fixes = ["Create .netlify-deploy.yaml or pass --config"]
            return self

        issues = config.validate()
        if issues:
            self.passed = False
            self.message = "; ".join(issues)
        else:
            self.passed = True
            self.message = f"{len(config.targets)} target(s) in {ctx.obj.config_service.config_path}"
        return self


class StateCheck(DiagnosticCheck):
    """Check the persisted state file"""

    def __init__(self):
        super().__init__("State File", "Read remembered site ids")

    def run(self, ctx):
        try:
            store = StateStore(ctx.obj.config.state.path)
            entries = run_async(store.all())
        except ConfigError:
            self.passed = False
            self.message = "Skipped: configuration not loaded"
            return self
        except StateStoreError as e:
            self.passed = False
            self.message = str(e)
            self.fixes = ["Run 'netlify-deploy state clear'"]
            return self

        self.passed = True
        self.message = f"{len(entries)} site id(s) in {store.path}"
        return self


class CiCheck(DiagnosticCheck):
    """Report CI detection (informational)"""

    def __init__(self):
        super().__init__("CI Detection", "Detect a CI/CD environment")

    def run(self, ctx):
        extra = []
        try:
            extra = ctx.obj.config.ci.extra_variables
        except ConfigError:
            pass

        variable = detect_ci_variable(extra_keys=extra)
        self.passed = True
        if variable:
            self.message = f"Running in CI ({variable} is set); prompts disabled"
        else:
            self.message = "Not running in CI; prompts allowed"
        return self


@click.command()
@click.pass_context
def doctor(ctx):
    """Run system diagnostics

    Checks that the Netlify CLI and npm are available, that the project
    configuration is valid and that remembered site ids can be read.

    Examples:
        netlify-deploy doctor
    """
    console.print("[bold]Netlify Deploy Diagnostics[/bold]\n")

    tool_command, package_manager = "ntl", "npm"
    try:
        tool_command = ctx.obj.config.tool.command
        package_manager = ctx.obj.config.tool.package_manager
    except ConfigError:
        pass

    checks = [
        ToolCheck("Netlify CLI", tool_command, "Run 'npm install -g netlify-cli' (deploy installs it automatically)"),
        ToolCheck("npm", package_manager, "Install Node.js from https://nodejs.org"),
        ConfigCheck(),
        StateCheck(),
        CiCheck(),
    ]

    failed_checks = []
    for diagnostic_check in checks:
        diagnostic_check.run(ctx)
        if not diagnostic_check.passed:
            failed_checks.append(diagnostic_check)

    table = Table(title="Diagnostic Results", box=box.ROUNDED)
    table.add_column("Check", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Details")

    for diagnostic_check in checks:
        status = "[green]✓ PASS[/green]" if diagnostic_check.passed else "[red]✗ FAIL[/red]"
        table.add_row(diagnostic_check.name, status, diagnostic_check.message)

    console.print(table)

    for diagnostic_check in failed_checks:
        for fix in diagnostic_check.fixes:
            console.print(f"  [yellow]→[/yellow] {diagnostic_check.name}: {fix}")

    if failed_checks:
        console.print(f"\n[red]{len(failed_checks)} check(s) failed[/red]")
        sys.exit(1)
