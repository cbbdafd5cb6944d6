"""Platform detection for the SourceClear agent.

Maps the host kernel and C library to the platform identifier used in agent
archive names. Only 64-bit x86 Linux (glibc or musl) and macOS are shipped;
Apple Silicon hosts run the x86_64 agent under emulation.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from srcclr_ci.core.errors import UnsupportedPlatformError
from srcclr_ci.core.logging import get_logger

LOGGER = get_logger(__name__)

SUPPORTED_ARCH = "x86_64"

# Release marker inspected to tell musl (Alpine) from glibc Linux
OS_RELEASE_PATH = Path("/etc/os-release")


class PlatformId(str, Enum):
    """Platform identifiers as they appear in agent archive names."""

    LINUX_GLIBC = "linux"
    LINUX_MUSL = "linux_musl_x64"
    MACOS = "macosx"


def check_architecture(machine: str, kernel: str) -> None:
    """Verify the CPU architecture can run the agent.

    Args:
        machine: Raw architecture string from ``platform.machine()``.
        kernel: Raw kernel name from ``platform.system()``.

    Raises:
        UnsupportedPlatformError: If the architecture is not x86_64 and the
            host is not macOS.
    """
    LOGGER.debug(f"check_architecture: architecture: {machine}")
    if machine == SUPPORTED_ARCH:
        return
    if kernel == "Darwin":
        LOGGER.warning(
            "Veracode doesn't ship an arm64 specific agent. "
            "As Mac M1 can run x86 agent we are proceeding"
        )
        return
    LOGGER.debug("check_architecture: architecture is not x86_64")
    raise UnsupportedPlatformError(
        f"Veracode SCA CI only supports x86_64, but your uname -m reported '{machine}'"
    )


def is_alpine(os_release: Path = OS_RELEASE_PATH) -> bool:
    """Return True when the os-release marker names Alpine (musl libc)."""
    try:
        return "alpine" in os_release.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return False


def detect_platform_id(kernel: str, os_release: Path = OS_RELEASE_PATH) -> PlatformId:
    """Classify the kernel (and libc on Linux) into a :class:`PlatformId`.

    Raises:
        UnsupportedPlatformError: If the kernel is neither Linux nor Darwin.
    """
    LOGGER.debug(f"check_and_set_OS: kernel: {kernel}")
    if kernel in ("linux", "Linux"):
        if is_alpine(os_release):
            LOGGER.debug("check_and_set_OS: Linux (musl) Kernel OK")
            return PlatformId.LINUX_MUSL
        LOGGER.debug("check_and_set_OS: Linux (glibc) Kernel OK")
        return PlatformId.LINUX_GLIBC
    if kernel in ("darwin", "Darwin"):
        LOGGER.debug("check_and_set_OS: Mac OS X Kernel OK")
        return PlatformId.MACOS
    LOGGER.debug("check_and_set_OS: Kernel not recognized")
    raise UnsupportedPlatformError(
        f"Veracode SCA CI only supports Linux or Darwin, but your uname -s reported '{kernel}'"
    )


@dataclass(frozen=True)
class PlatformInfo:
    """Information about the current platform.

    Attributes:
        kernel: Kernel name as reported by ``uname -s``.
        machine: Architecture as reported by ``uname -m``.
        platform_id: Archive platform identifier.
    """

    kernel: str
    machine: str
    platform_id: PlatformId


def get_platform_info(
    kernel: Optional[str] = None,
    machine: Optional[str] = None,
    os_release: Path = OS_RELEASE_PATH,
) -> PlatformInfo:
    """Detect and return current platform information.

    Raises:
        UnsupportedPlatformError: If the platform is not supported.
    """
    kernel = kernel if kernel is not None else platform.system()
    machine = machine if machine is not None else platform.machine()
    check_architecture(machine, kernel)
    platform_id = detect_platform_id(kernel, os_release)
    return PlatformInfo(kernel=kernel, machine=machine, platform_id=platform_id)
