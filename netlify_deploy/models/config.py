"""Configuration data models"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .target import DeploymentTarget
from ..constants import (
    CONFIG_VERSION,
    DEFAULT_MAX_PARALLEL,
    DEFAULT_PACKAGE_MANAGER,
    DEFAULT_STATE_FILE,
    DEFAULT_TOOL_COMMAND,
    DEFAULT_TOOL_PACKAGE,
    TARGET_NAME_PATTERN,
)


@dataclass
class ToolConfig:
    """External CLI settings"""

    command: str = DEFAULT_TOOL_COMMAND
    package: str = DEFAULT_TOOL_PACKAGE
    package_manager: str = DEFAULT_PACKAGE_MANAGER

    @property
    def install_arguments(self) -> List[str]:
        """Arguments for a global install with the package manager"""
        return ["install", "-g", self.package]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "command": self.command,
            "package": self.package,
            "package_manager": self.package_manager,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ToolConfig':
        return cls(
            command=data.get("command", DEFAULT_TOOL_COMMAND),
            package=data.get("package", DEFAULT_TOOL_PACKAGE),
            package_manager=data.get("package_manager", DEFAULT_PACKAGE_MANAGER),
        )


@dataclass
class StateConfig:
    """Persisted state settings"""

    path: str = DEFAULT_STATE_FILE
    namespace: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"path": self.path}
        if self.namespace:
            data["namespace"] = self.namespace
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StateConfig':
        return cls(
            path=data.get("path", DEFAULT_STATE_FILE),
            namespace=data.get("namespace"),
        )


@dataclass
class DeploySettings:
    """Run-wide deploy settings"""

    max_parallel: int = DEFAULT_MAX_PARALLEL
    interactive: bool = True

    def __post_init__(self):
        if int(self.max_parallel) < 1:
            raise ValueError("deploy.max_parallel must be at least 1")
        self.max_parallel = int(self.max_parallel)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_parallel": self.max_parallel,
            "interactive": self.interactive,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeploySettings':
        return cls(
            max_parallel=data.get("max_parallel", DEFAULT_MAX_PARALLEL),
            interactive=bool(data.get("interactive", True)),
        )


@dataclass
class CiConfig:
    """CI detection settings"""

    extra_variables: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"extra_variables": list(self.extra_variables)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CiConfig':
        return cls(extra_variables=[str(v) for v in data.get("extra_variables", []) or []])


@dataclass
class Config:
    """Project configuration"""

    version: str = CONFIG_VERSION
    tool: ToolConfig = field(default_factory=ToolConfig)
    state: StateConfig = field(default_factory=StateConfig)
    deploy: DeploySettings = field(default_factory=DeploySettings)
    ci: CiConfig = field(default_factory=CiConfig)
    targets: Dict[str, DeploymentTarget] = field(default_factory=dict)

    def get_target(self, name: str) -> Optional[DeploymentTarget]:
        """Get a target by name"""
        return self.targets.get(name)

    def select_targets(self, names: Optional[List[str]] = None) -> List[DeploymentTarget]:
        """Select targets by name, keeping configuration order

        Raises:
            ValueError: If a requested target is not configured
        """
        if not names:
            return list(self.targets.values())

        missing = [n for n in names if n not in self.targets]
        if missing:
            raise ValueError(f"Unknown target(s): {', '.join(missing)}")

        return [t for n, t in self.targets.items() if n in names]

    def validate(self) -> List[str]:
        """Return a list of configuration issues"""
        issues = []

        if not self.targets:
            issues.append("No deployment targets configured")

        for name in self.targets:
            if not TARGET_NAME_PATTERN.match(name):
                issues.append(f"Invalid target name: {name}")

        for name, target in self.targets.items():
            if target.options.create_site and target.options.site:
                issues.append(f"Target '{name}' sets both 'site' and 'create_site'")

        return issues

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "tool": self.tool.to_dict(),
            "state": self.state.to_dict(),
            "deploy": self.deploy.to_dict(),
            "ci": self.ci.to_dict(),
            "targets": {name: t.to_dict() for name, t in self.targets.items()},
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Config':
        """Create from dictionary

        Raises:
            ValueError: If the configuration is malformed
        """
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError("Configuration root must be a mapping")

        state = StateConfig.from_dict(data.get("state") or {})

        targets = {}
        for name, target_data in (data.get("targets") or {}).items():
            if not isinstance(target_data, dict):
                raise ValueError(f"Target '{name}' must be a mapping")
            targets[str(name)] = DeploymentTarget.from_dict(
                str(name), target_data, namespace=state.namespace
            )

        return cls(
            version=str(data.get("version", CONFIG_VERSION)),
            tool=ToolConfig.from_dict(data.get("tool") or {}),
            state=state,
            deploy=DeploySettings.from_dict(data.get("deploy") or {}),
            ci=CiConfig.from_dict(data.get("ci") or {}),
            targets=targets,
        )
