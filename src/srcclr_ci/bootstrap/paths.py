"""Path management for the agent cache directory.

Directory structure:
    <cache>/
        srcclr-<version>-<platform>.tgz   - downloaded archives, one per version
        srcclr/                           - the single extracted installation
            VERSION                       - version of the extracted agent
            bin/srcclr                    - agent executable
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Optional

from srcclr_ci.bootstrap.platform import PlatformId


@dataclass(frozen=True)
class CachePaths:
    """Manages paths within the agent cache directory."""

    cache_dir: Path

    _INSTALL_DIR: ClassVar[str] = "srcclr"
    _VERSION_FILE: ClassVar[str] = "VERSION"
    _AGENT_NAME: ClassVar[str] = "srcclr"

    @staticmethod
    def archive_name(version: str, platform_id: PlatformId) -> str:
        """Return the archive file name for a version and platform.

        Example: "srcclr-3.8.1-linux.tgz"
        """
        return f"srcclr-{version}-{platform_id.value}.tgz"

    def archive_path(self, version: str, platform_id: PlatformId) -> Path:
        """Path of the cached archive for a version and platform."""
        return self.cache_dir / self.archive_name(version, platform_id)

    @property
    def install_dir(self) -> Path:
        """Root of the extracted installation."""
        return self.cache_dir / self._INSTALL_DIR

    @property
    def version_marker(self) -> Path:
        """Marker file recording the extracted agent version."""
        return self.install_dir / self._VERSION_FILE

    @property
    def agent_bin(self) -> Path:
        """Path to the agent executable."""
        return self.install_dir / "bin" / self._AGENT_NAME

    def ensure_cache_dir(self) -> None:
        """Create the cache directory if it doesn't exist."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def has_archive(self, version: str, platform_id: PlatformId) -> bool:
        return self.archive_path(version, platform_id).is_file()

    def installed_version(self) -> Optional[str]:
        """Return the extracted agent version, or None if nothing is extracted."""
        if not self.install_dir.is_dir() or not self.version_marker.is_file():
            return None
        try:
            return self.version_marker.read_text(encoding="utf-8").strip()
        except OSError:
            return None
