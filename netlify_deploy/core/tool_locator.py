# netlify_deploy/core/tool_locator.py
"""Executable lookup on the search path"""

import os
from pathlib import Path
from typing import List, Mapping, Optional

from ..api.exceptions import ToolNotFoundError
from ..constants import DEFAULT_PATHEXT
from ..models.result import ToolLocation


class ToolLocator:
    """Finds executables on PATH, honouring PATHEXT conventions"""

    def __init__(self,
                 environ: Optional[Mapping[str, str]] = None,
                 is_windows: Optional[bool] = None):
        """
        Initialize tool locator

        Args:
            environ: Environment mapping (defaults to os.environ)
            is_windows: Override platform detection
        """
        self._environ = environ
        self.is_windows = (os.name == "nt") if is_windows is None else is_windows

    @property
    def environ(self) -> Mapping[str, str]:
        return self._environ if self._environ is not None else os.environ

    def search_paths(self) -> List[str]:
        """Directories listed in PATH, in order"""
        raw = self.environ.get("PATH", "") or ""
        separator = ";" if self.is_windows else os.pathsep
        return [p for p in raw.split(separator) if p]

    def extensions(self) -> List[str]:
        """Executable extensions to try"""
        pathext = self.environ.get("PATHEXT") or DEFAULT_PATHEXT
        exts = [e for e in pathext.split(";") if e]

        if self.is_windows:
            return exts

        # Case-sensitive filesystems: also try the lower-case spelling
        candidates = []
        for ext in exts:
            for variant in (ext, ext.lower()):
                if variant not in candidates:
                    candidates.append(variant)
        return candidates

    def candidates(self, directory: str, name: str) -> List[Path]:
        """Candidate files for one directory, in lookup order"""
        base = Path(directory)
        with_ext = [base / f"{name}{ext}" for ext in self.extensions()]
        bare = base / name

        # Windows shims (ntl.cmd) win over an extensionless file there;
        # elsewhere the bare name is the real executable.
        if self.is_windows:
            return with_ext + [bare]
        return [bare] + with_ext

    def locate(self, name: str) -> ToolLocation:
        """
        Locate an executable

        Args:
            name: Bare tool name (e.g. "ntl")

        Returns:
            ToolLocation; found=False when no candidate exists
        """
        for directory in self.search_paths():
            for candidate in self.candidates(directory, name):
                try:
                    if candidate.is_file():
                        return ToolLocation(found=True, path=str(candidate), name=name)
                except OSError:
                    continue

        return ToolLocation.not_found(name)

    def require(self, name: str) -> str:
        """
        Full path of an executable

        Raises:
            ToolNotFoundError: If it is not on the search path
        """
        location = self.locate(name)
        if not location.found:
            raise ToolNotFoundError(name)
        return location.path
