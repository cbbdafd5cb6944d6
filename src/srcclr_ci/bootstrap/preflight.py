"""Preflight checks for executables the launcher relies on."""

from __future__ import annotations

import shutil
from typing import Callable, List, Optional, Sequence

from srcclr_ci.config.settings import LauncherConfig
from srcclr_ci.core.errors import MissingDependencyError
from srcclr_ci.core.logging import get_logger

LOGGER = get_logger(__name__)

# The agent's default scan inspects the git working tree
REQUIRED_BINARIES = ("git",)


def required_binaries(config: LauncherConfig, args: Sequence[str]) -> Sequence[str]:
    """Return the executables the requested run depends on.

    Downloads and extraction run in-process, so nothing is needed unless the
    agent is going to run its default scan. Forwarded arguments select some
    other action, and NOSCAN never starts the agent at all.
    """
    if config.no_scan or args:
        return ()
    return REQUIRED_BINARIES


def find_missing_binaries(
    required: Sequence[str] = REQUIRED_BINARIES,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> List[str]:
    """Return the required executables that are not on PATH."""
    missing = []
    for binary in required:
        if which(binary):
            LOGGER.debug(f"check_binaries: checking for {binary}: OK")
        else:
            missing.append(binary)
    return missing


def check_binaries(
    required: Sequence[str] = REQUIRED_BINARIES,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> None:
    """Verify every required executable is on PATH.

    All executables are checked before failing so that every missing one is
    reported.

    Raises:
        MissingDependencyError: If any executable is missing.
    """
    missing = find_missing_binaries(required, which)
    for binary in missing:
        LOGGER.error(f"{binary} is required to continue, but could not be found on your system.")
    if missing:
        raise MissingDependencyError(missing)
