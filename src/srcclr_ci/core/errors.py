"""Launcher error hierarchy.

Every fatal condition raised by a launcher stage derives from
:class:`LauncherError`; the CLI runner is the only place that turns one into
a process exit code.
"""

from __future__ import annotations

from typing import Iterable, Optional

EXIT_LAUNCHER_FAILURE = 1


class LauncherError(Exception):
    """Base class for launcher failures."""

    exit_code: int = EXIT_LAUNCHER_FAILURE


class ConfigError(LauncherError):
    """Invalid value in the launcher's environment configuration."""

    pass


class MissingDependencyError(LauncherError):
    """One or more required executables are not on PATH."""

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Missing required executables: {', '.join(self.missing)}")


class UnsupportedPlatformError(LauncherError):
    """The host architecture or kernel is not supported by the agent."""

    pass


class VersionLookupError(LauncherError):
    """The latest-version pointer could not be retrieved."""

    def __init__(self, message: str, detail: Optional[str] = None) -> None:
        self.detail = detail
        super().__init__(message)


class DownloadError(LauncherError):
    """The agent archive could not be downloaded."""

    def __init__(self, url: str, detail: str) -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"Failed to download {url}: {detail}")


class ArchiveMissingError(LauncherError):
    """The archive expected in the cache directory does not exist."""

    pass


class ExtractionError(LauncherError):
    """The agent archive could not be unpacked."""

    pass


class AgentLaunchError(LauncherError):
    """The extracted agent executable could not be started."""

    pass
