"""
Bootstrap module for the SourceClear agent.

This module handles:
- Preflight checks (required executables, architecture, kernel)
- The per-run scratch directory
- Version resolution against the LATEST_VERSION pointer
- Downloading and extracting the agent into the cache directory
"""

from srcclr_ci.bootstrap.bundle import BundleManager, construct_archive_url
from srcclr_ci.bootstrap.paths import CachePaths
from srcclr_ci.bootstrap.platform import PlatformId, PlatformInfo, get_platform_info
from srcclr_ci.bootstrap.preflight import check_binaries, required_binaries
from srcclr_ci.bootstrap.versions import VersionResolution, VersionSource, resolve_version
from srcclr_ci.bootstrap.workspace import scratch_directory

__all__ = [
    "BundleManager",
    "construct_archive_url",
    "CachePaths",
    "PlatformId",
    "PlatformInfo",
    "get_platform_info",
    "check_binaries",
    "required_binaries",
    "VersionResolution",
    "VersionSource",
    "resolve_version",
    "scratch_directory",
]
