"""CI / automation environment detection"""

import os
from typing import Iterable, Mapping, Optional

from ..constants import KNOWN_CI_VARIABLES

_FALSE_VALUES = ("false", "0")


def detect_ci_variable(environ: Optional[Mapping[str, str]] = None,
                       extra_keys: Optional[Iterable[str]] = None) -> Optional[str]:
    """Return the first CI variable that is set to a truthy value

    Args:
        environ: Environment mapping (defaults to os.environ)
        extra_keys: Additional variable names to check

    Returns:
        Variable name, or None outside CI
    """
    environ = os.environ if environ is None else environ

    keys = list(KNOWN_CI_VARIABLES)
    if extra_keys:
        keys.extend(extra_keys)

    for key in keys:
        value = environ.get(key)
        if value is None or not value.strip():
            continue

        if value.strip().lower() in _FALSE_VALUES:
            continue

        return key

    return None


def is_running_in_ci(environ: Optional[Mapping[str, str]] = None,
                     extra_keys: Optional[Iterable[str]] = None) -> bool:
    """Check whether this looks like a CI/CD pipeline"""
    return detect_ci_variable(environ, extra_keys) is not None
