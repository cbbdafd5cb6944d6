"""Agent version resolution.

The version to run is either pinned by the operator, read from the remote
``LATEST_VERSION`` pointer, or, when the pointer cannot be retrieved, the
``latest`` sentinel (which always forces a fresh download).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from srcclr_ci.bootstrap.download import FetchError, download_file
from srcclr_ci.bootstrap.paths import CachePaths
from srcclr_ci.bootstrap.platform import PlatformId
from srcclr_ci.config.settings import LauncherConfig
from srcclr_ci.core.errors import VersionLookupError
from srcclr_ci.core.logging import get_logger

LOGGER = get_logger(__name__)

LATEST_VERSION_PATH = "LATEST_VERSION"
LATEST_VERSION_TIMEOUT = 30
FALLBACK_VERSION = "latest"


class VersionSource(str, Enum):
    """Where a resolved version came from."""

    OVERRIDE = "override"
    LATEST = "latest"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class VersionResolution:
    """Result of resolving the agent version.

    Attributes:
        version: Version string used in archive names.
        source: Where the version came from.
        cached: True when the archive is already in the cache and the
            download stage can be skipped.
    """

    version: str
    source: VersionSource
    cached: bool = False


def latest_version_url(base_url: str) -> str:
    return f"{base_url.rstrip('/')}/{LATEST_VERSION_PATH}"


def fetch_latest_version(base_url: str, workspace: Path) -> str:
    """Retrieve the latest released agent version.

    Raises:
        VersionLookupError: If the pointer cannot be fetched or is empty.
    """
    url = latest_version_url(base_url)
    LOGGER.debug("check_and_set_latest_version: checking latest version...")
    try:
        version_file = download_file(url, workspace / "version", timeout=LATEST_VERSION_TIMEOUT)
        version = version_file.read_text(encoding="utf-8", errors="replace").strip()
    except FetchError as e:
        raise VersionLookupError(f"Could not retrieve {url}", detail=e.detail) from e
    if not version:
        raise VersionLookupError(f"{url} returned an empty version", detail="empty response body")
    LOGGER.debug(f"check_and_set_latest_version: retrieved LATEST_VERSION: {version}")
    return version


def resolve_version(
    config: LauncherConfig,
    paths: CachePaths,
    platform_id: PlatformId,
    workspace: Path,
) -> VersionResolution:
    """Decide which agent version to use and whether it must be downloaded.

    Args:
        config: Launcher configuration.
        paths: Cache directory layout.
        platform_id: Platform the archive is built for.
        workspace: Scratch directory for transient files.

    Returns:
        The resolved version. Lookup failures degrade to the ``latest``
        sentinel with a warning rather than raising.
    """
    if config.version_override:
        LOGGER.debug(f"main: SRCCLR_VERSION is set to {config.version_override}")
        return VersionResolution(config.version_override, VersionSource.OVERRIDE)

    try:
        version = fetch_latest_version(config.download_base_url, workspace)
    except VersionLookupError as e:
        LOGGER.debug(f"check_and_set_latest_version: retrieving LATEST_VERSION failed: {e}")
        LOGGER.warning(
            "we were not able to retrieve LATEST_VERSION, and will therefore "
            "not use the locally cached agent"
        )
        LOGGER.warning("the request provided the following output, which may be useful for debugging:")
        LOGGER.warning(e.detail or str(e))
        return VersionResolution(FALLBACK_VERSION, VersionSource.FALLBACK)

    if config.use_cache and paths.has_archive(version, platform_id):
        LOGGER.debug("check_and_set_latest_version: latest version already exists.")
        return VersionResolution(version, VersionSource.LATEST, cached=True)

    LOGGER.debug(
        "check_and_set_latest_version: latest version does not exist and will be downloaded."
    )
    return VersionResolution(version, VersionSource.LATEST)
