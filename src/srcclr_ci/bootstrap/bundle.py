"""Agent bundle management.

Handles downloading the versioned agent archive into the cache directory and
extracting it into the single cached installation.
"""

from __future__ import annotations

import shutil
import tarfile
import time
import zlib
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional

from srcclr_ci.bootstrap.download import FetchError, download_file
from srcclr_ci.bootstrap.paths import CachePaths
from srcclr_ci.bootstrap.platform import PlatformId
from srcclr_ci.core.errors import ArchiveMissingError, DownloadError, ExtractionError
from srcclr_ci.core.logging import get_logger

LOGGER = get_logger(__name__)

DOWNLOAD_TIMEOUT = 300


def construct_archive_url(version: str, platform_id: PlatformId, base_url: str) -> str:
    """Construct the download URL for a versioned, platform-specific archive.

    Example: "https://download.sourceclear.com/srcclr-3.8.1-linux.tgz"
    """
    return f"{base_url.rstrip('/')}/{CachePaths.archive_name(version, platform_id)}"


def _strip_leading_component(name: str) -> Optional[str]:
    parts = PurePosixPath(name).parts
    if len(parts) <= 1:
        return None
    return str(PurePosixPath(*parts[1:]))


@dataclass
class BundleManager:
    """Manages the cached agent archive and its extracted installation."""

    paths: CachePaths
    platform_id: PlatformId
    base_url: str
    use_cache: bool = True

    def archive_url(self, version: str) -> str:
        return construct_archive_url(version, self.platform_id, self.base_url)

    def archive_path(self, version: str) -> Path:
        return self.paths.archive_path(version, self.platform_id)

    def download(self, version: str, workspace: Path, reuse_cached: bool = False) -> Path:
        """Download the archive for ``version`` into the cache directory.

        Args:
            version: Agent version to download.
            workspace: Scratch directory the archive is downloaded into
                before being moved into the cache.
            reuse_cached: Skip the download when the archive is already
                cached and caching is enabled.

        Returns:
            Path to the cached archive.

        Raises:
            DownloadError: If the download fails.
        """
        archive_path = self.archive_path(version)
        if reuse_cached and self.use_cache and archive_path.is_file():
            LOGGER.debug(f"download: {archive_path} already cached; skipping.")
            return archive_path

        url = self.archive_url(version)
        LOGGER.debug(
            f"download: retrieving srcclr v{version} for {self.platform_id.value} via {url}..."
        )
        t0 = time.monotonic()
        try:
            temp_path = download_file(url, workspace / archive_path.name, timeout=DOWNLOAD_TIMEOUT)
        except FetchError as e:
            LOGGER.debug(f"download: retrieval failed: {e.detail}")
            LOGGER.error(f"We were not able to download your installation package from {url}.")
            LOGGER.error("The request provided the following output, which may be useful for debugging:")
            LOGGER.error(e.detail)
            raise DownloadError(url, e.detail) from e
        LOGGER.debug(f"download: retrieved in {time.monotonic() - t0:.0f}s.")

        try:
            self.paths.ensure_cache_dir()
            shutil.move(str(temp_path), str(archive_path))
        except OSError as e:
            raise DownloadError(url, f"could not store archive in {self.paths.cache_dir}: {e}") from e
        return archive_path

    def is_extracted(self, version: str) -> bool:
        """Check whether the cached installation already holds ``version``."""
        return self.use_cache and self.paths.installed_version() == version

    def extract(self, version: str) -> None:
        """Extract the cached archive for ``version`` into the installation directory.

        Any previous installation is removed first; a stale installation is
        never partially reused.

        Raises:
            ArchiveMissingError: If the archive is not in the cache.
            ExtractionError: If the install directory cannot be prepared or
                the archive cannot be unpacked.
        """
        if self.is_extracted(version):
            LOGGER.debug("extract: version is already extracted; skipping.")
            return
        LOGGER.debug("extract: version not extracted; continuing.")

        archive_path = self.archive_path(version)
        if not archive_path.is_file():
            raise ArchiveMissingError(
                f'extract expected "{archive_path}" to exist, but file is not found.'
            )
        LOGGER.debug(f'extract: archive "{archive_path}" found')

        install_dir = self.paths.install_dir
        shutil.rmtree(install_dir, ignore_errors=True)
        try:
            install_dir.mkdir(parents=True)
        except OSError as e:
            raise ExtractionError(
                f'extract: failed to create target directory "{install_dir}": {e}'
            ) from e
        LOGGER.debug(f'extract: "{install_dir}" created')

        LOGGER.debug("extract: extracting srcclr...")
        t0 = time.monotonic()
        try:
            self._extract_tarball(archive_path, install_dir)
        except (tarfile.TarError, OSError, ValueError, EOFError, zlib.error) as e:
            LOGGER.debug(f"extract: extraction failed: {e}")
            raise ExtractionError(
                f"extract: errors occurred while extracting the srcclr package: {e}"
            ) from e
        self._set_executable_permissions()
        LOGGER.debug(f"extract: extraction complete in {time.monotonic() - t0:.0f}s.")

    def _extract_tarball(self, archive_path: Path, dest_dir: Path) -> None:
        """Extract a .tgz archive, dropping its single top-level directory."""
        dest_root = dest_dir.resolve()
        extract_kwargs = {"filter": "data"} if hasattr(tarfile, "data_filter") else {}
        with tarfile.open(archive_path, "r:gz") as tar:
            for member in tar.getmembers():
                stripped = _strip_leading_component(member.name)
                if stripped is None:
                    continue
                member_path = (dest_root / stripped).resolve()
                if not member_path.is_relative_to(dest_root):
                    raise ValueError(f"Path traversal detected: {member.name}")
                member.name = stripped
                if member.islnk():
                    link_target = _strip_leading_component(member.linkname)
                    if link_target is None:
                        raise ValueError(f"Unsupported hard link in archive: {member.linkname}")
                    member.linkname = link_target
                tar.extract(member, path=dest_dir, **extract_kwargs)

    def _set_executable_permissions(self) -> None:
        binary = self.paths.agent_bin
        if binary.exists():
            binary.chmod(binary.stat().st_mode | 0o111)
