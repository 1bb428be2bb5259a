"""Command-line argument construction for `ntl deploy`"""

from typing import List, NamedTuple, Optional

from ..constants import DEPLOY_VERB, REDACT_CHAR, REDACT_MASK_LENGTH
from ..models.target import DeployOptions


class CliArgs(NamedTuple):
    """Parallel argument lists: raw for execution, redacted for display"""
    raw: List[str]
    redacted: List[str]

    def display(self, command: str = "ntl") -> str:
        """Loggable command line"""
        return " ".join([command] + self.redacted)


def redact(value: Optional[str],
           redact_char: str = REDACT_CHAR,
           mask_length: int = REDACT_MASK_LENGTH) -> str:
    """
    Mask the middle of a sensitive value

    Values no longer than the mask are replaced entirely; longer values
    keep their first two and last two characters.

    Args:
        value: Sensitive value
        redact_char: Masking character
        mask_length: Number of masking characters

    Returns:
        Redacted value
    """
    if not value:
        return ""

    mask = redact_char * mask_length

    if len(value) <= mask_length:
        return mask

    return f"{value[:2]}{mask}{value[-2:]}"


class _ArgumentList:
    """Appends to raw and redacted lists together"""

    def __init__(self):
        self.raw: List[str] = []
        self.redacted: List[str] = []

    def flag(self, name: str, enabled: Optional[bool]) -> None:
        if enabled is True:
            self.raw.append(name)
            self.redacted.append(name)

    def value(self, name: str, value: Optional[str], sensitive: bool = False) -> None:
        if not value:
            return
        self.raw.extend([name, value])
        self.redacted.extend([name, redact(value) if sensitive else value])


def build_arguments(options: DeployOptions,
                    resolved_build_dir: Optional[str] = None) -> CliArgs:
    """
    Build `ntl deploy` arguments from deploy options

    Args:
        options: Deploy options
        resolved_build_dir: Absolute build directory (overrides options.dir)

    Returns:
        CliArgs(raw, redacted)
    """
    args = _ArgumentList()

    args.raw.append(DEPLOY_VERB)
    args.redacted.append(DEPLOY_VERB)
    args.value("--dir", resolved_build_dir or options.dir or ".")

    args.value("--alias", options.alias)
    args.value("--context", options.context)
    args.value("--create-site", options.create_site)
    args.value("--filter", options.filter)
    args.value("--functions", options.functions)
    args.flag("--json", options.json)
    args.value("--message", options.message)
    args.flag("--no-build", options.no_build)
    args.flag("--open", options.open)
    args.flag("--prod-if-unlocked", options.prod_if_unlocked)
    args.flag("--debug", options.debug)
    args.value("--auth", options.auth, sensitive=True)
    args.flag("--prod", options.prod)
    args.value("--site", options.site, sensitive=True)
    args.flag("--skip-functions-cache", options.skip_functions_cache)
    args.value("--team", options.team, sensitive=True)
    args.value("--timeout", options.timeout)
    args.flag("--trigger", options.trigger)

    return CliArgs(raw=args.raw, redacted=args.redacted)
