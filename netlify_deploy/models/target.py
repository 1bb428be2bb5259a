"""Deployment target data models"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import aiofiles

from ..constants import DEFAULT_BUILD_DIR


class SecretSource(ABC):
    """A credential bound to a deployment target, resolved lazily"""

    @abstractmethod
    async def get_value(self) -> Optional[str]:
        """Resolve the secret value (None when unavailable)"""
        pass

    @abstractmethod
    def to_config(self) -> Any:
        """The configuration form this secret was created from"""
        pass


class StaticSecret(SecretSource):
    """Secret given inline"""

    def __init__(self, value: str):
        self._value = value

    async def get_value(self) -> Optional[str]:
        return self._value

    def to_config(self) -> Any:
        return self._value


class EnvironmentSecret(SecretSource):
    """Secret read from an environment variable"""

    def __init__(self, name: str, environ: Optional[Mapping[str, str]] = None):
        self.name = name
        self._environ = environ

    async def get_value(self) -> Optional[str]:
        environ = self._environ if self._environ is not None else os.environ
        return environ.get(self.name)

    def to_config(self) -> Any:
        return {"env": self.name}


class FileSecret(SecretSource):
    """Secret read from a file (trailing whitespace stripped)"""

    def __init__(self, path: Union[str, Path]):
        self.configured_path = str(path)
        self.path = Path(path).expanduser()

    async def get_value(self) -> Optional[str]:
        if not self.path.is_file():
            return None

        async with aiofiles.open(self.path, 'r', encoding='utf-8') as f:
            content = await f.read()

        return content.strip()

    def to_config(self) -> Any:
        return {"file": self.configured_path}


def secret_from_config(value: Any) -> Optional[SecretSource]:
    """Create a secret source from configuration

    Accepted forms:
        "literal-token"
        {"env": "VARIABLE_NAME"}
        {"file": "path/to/token"}

    Args:
        value: Raw configuration value

    Returns:
        SecretSource or None if value is empty
    """
    if value is None or value == "":
        return None

    if isinstance(value, str):
        return StaticSecret(value)

    if isinstance(value, dict):
        if "env" in value:
            return EnvironmentSecret(str(value["env"]))
        if "file" in value:
            return FileSecret(str(value["file"]))

    raise ValueError(f"Unsupported auth_token configuration: {value!r}")


@dataclass
class DeployOptions:
    """Options passed to `ntl deploy`

    See https://cli.netlify.com/commands/deploy/ for the meaning of
    each flag.
    """

    alias: Optional[str] = None
    context: Optional[str] = None
    create_site: Optional[str] = None
    dir: Optional[str] = None
    filter: Optional[str] = None
    functions: Optional[str] = None
    json: Optional[bool] = None
    message: Optional[str] = None
    no_build: Optional[bool] = None
    open: Optional[bool] = None
    prod_if_unlocked: Optional[bool] = None
    debug: Optional[bool] = None
    auth: Optional[str] = None
    prod: Optional[bool] = None
    site: Optional[str] = None
    skip_functions_cache: Optional[bool] = None
    team: Optional[str] = None
    timeout: Optional[str] = None
    trigger: Optional[bool] = None

    def describe_environment(self) -> str:
        """Describe which environment the deploy goes to"""
        if self.prod is True:
            return "production"
        if self.prod_if_unlocked is True:
            return "production-if-unlocked"
        if self.alias:
            return f"alias: {self.alias}"
        return "preview"

    def merge(self, overrides: Dict[str, Any]) -> None:
        """Apply non-None overrides in place"""
        known = {f.name for f in fields(self)}
        for key, value in overrides.items():
            if key not in known:
                raise ValueError(f"Unknown deploy option: {key}")
            if value is not None:
                setattr(self, key, value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (unset options and auth omitted)"""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None and f.name != "auth"
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'DeployOptions':
        """Create from dictionary, accepting dashed or underscored keys"""
        options = cls()
        if not data:
            return options

        normalized = {}
        for key, value in data.items():
            normalized[str(key).replace('-', '_')] = value

        # Timeout is passed through as a string
        if normalized.get("timeout") is not None:
            normalized["timeout"] = str(normalized["timeout"])

        options.merge(normalized)
        return options


@dataclass
class DeploymentTarget:
    """One build artifact to publish to one Netlify site"""

    name: str
    working_dir: str
    build_dir: str = DEFAULT_BUILD_DIR
    options: DeployOptions = field(default_factory=DeployOptions)
    auth_token: Optional[SecretSource] = None
    namespace: Optional[str] = None

    @property
    def site_id(self) -> Optional[str]:
        """Site identifier currently bound to this target"""
        return self.options.site

    @site_id.setter
    def site_id(self, value: Optional[str]) -> None:
        self.options.site = value

    @property
    def state_key(self) -> str:
        """Key used in persisted state"""
        if self.namespace:
            return f"{self.namespace}:{self.name}"
        return self.name

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "working_dir": self.working_dir,
            "build_dir": self.build_dir,
        }

        options = self.options.to_dict()
        if options:
            data["options"] = options

        if self.auth_token is not None:
            data["auth_token"] = self.auth_token.to_config()

        return data

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any],
                  namespace: Optional[str] = None) -> 'DeploymentTarget':
        """Create from dictionary"""
        if "working_dir" not in data:
            raise ValueError(f"Target '{name}' requires 'working_dir'")

        return cls(
            name=name,
            working_dir=str(data["working_dir"]),
            build_dir=str(data.get("build_dir", DEFAULT_BUILD_DIR)),
            options=DeployOptions.from_dict(data.get("options")),
            auth_token=secret_from_config(data.get("auth_token")),
            namespace=namespace,
        )
