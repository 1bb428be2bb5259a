"""Shared test fixtures"""

import asyncio
import stat
from pathlib import Path
from typing import Callable, Dict, List, NamedTuple, Optional, Union

import pytest
from rich.console import Console

from netlify_deploy.core.interaction import InteractionService
from netlify_deploy.core.reporting import ActivityReporter
from netlify_deploy.core.state_store import StateStore
from netlify_deploy.core.tool_locator import ToolLocator
from netlify_deploy.models import Config, DeploymentTarget, DeployOptions, ExecutionResult

SITE_GUID = "0b6f4c3e-2f59-4d2c-9f1a-8f4f2d0c7a11"


class RunCall(NamedTuple):
    command: str
    args: List[str]
    cwd: Optional[str]


Response = Union[ExecutionResult, Callable[..., ExecutionResult]]


async def _emit(callback, line):
    if callback is None:
        return
    result = callback(line)
    if asyncio.iscoroutine(result):
        await result


class FakeRunner:
    """Process runner answering by the first argument (the CLI verb)"""

    def __init__(self):
        self.calls: List[RunCall] = []
        self.responses: Dict[str, List[Response]] = {}

    def on(self, verb: str, exit_code: int = 0, stdout: str = "", stderr: str = "",
           handler: Optional[Callable[..., ExecutionResult]] = None) -> None:
        """Queue a response; the last queued response repeats"""
        response = handler or ExecutionResult(exit_code, stdout, stderr)
        self.responses.setdefault(verb, []).append(response)

    def calls_for(self, verb: str) -> List[RunCall]:
        return [c for c in self.calls if c.args and c.args[0] == verb]

    async def run(self, command, args, cwd=None, env=None,
                  on_stdout=None, on_stderr=None, cancel_event=None):
        self.calls.append(RunCall(command, list(args), cwd))

        verb = args[0] if args else ""
        queued = self.responses.get(verb)
        if not queued:
            response = ExecutionResult(0)
        elif len(queued) > 1:
            response = queued.pop(0)
        else:
            response = queued[0]

        if callable(response):
            response = response(command, list(args), cwd)

        for line in response.stdout.splitlines():
            await _emit(on_stdout, line)
        for line in response.stderr.splitlines():
            await _emit(on_stderr, line)

        return response


class FakeInteraction(InteractionService):
    """Interaction service returning canned answers"""

    def __init__(self, answers: Optional[List[Optional[str]]] = None, available: bool = True):
        self.answers = list(answers or [])
        self.available = available
        self.prompts: List[str] = []

    @property
    def is_available(self) -> bool:
        return self.available

    async def prompt_input(self, title, message, label, placeholder=None, validator=None):
        self.prompts.append(message)
        while self.answers:
            answer = self.answers.pop(0)
            if answer is None:
                return None
            if validator is None or validator(answer) is None:
                return answer
        return None


def make_executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def bin_dir(tmp_path):
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture
def environ(bin_dir):
    """Clean, CI-free environment with only the fake bin directory on PATH"""
    return {"PATH": str(bin_dir)}


@pytest.fixture
def locator(environ):
    return ToolLocator(environ=environ, is_windows=False)


@pytest.fixture
def reporter():
    return ActivityReporter(Console(quiet=True))


@pytest.fixture
def state_store(tmp_path):
    return StateStore(tmp_path / "state" / "state.json")


@pytest.fixture
def site_dir(tmp_path):
    path = tmp_path / "site"
    (path / "dist").mkdir(parents=True)
    return path


@pytest.fixture
def make_target(site_dir):
    def factory(name: str = "web", **options) -> DeploymentTarget:
        return DeploymentTarget(
            name=name,
            working_dir=str(site_dir),
            options=DeployOptions(**options),
        )
    return factory


@pytest.fixture
def config(state_store):
    config = Config()
    config.state.path = str(state_store.path)
    return config
