"""Launcher orchestration.

Runs the launcher stages in order: preflight, scratch directory, version
resolution, download, extraction and finally the hand-off to the agent.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable, Iterable, Mapping, Optional, Sequence

from srcclr_ci.bootstrap.bundle import BundleManager
from srcclr_ci.bootstrap.paths import CachePaths
from srcclr_ci.bootstrap.platform import PlatformInfo, get_platform_info
from srcclr_ci.bootstrap.preflight import check_binaries, required_binaries
from srcclr_ci.bootstrap.versions import VersionSource, resolve_version
from srcclr_ci.bootstrap.workspace import scratch_directory
from srcclr_ci.cli.agent import build_agent_args, exec_agent
from srcclr_ci.cli.exit_codes import EXIT_INTERRUPTED, EXIT_SUCCESS
from srcclr_ci.config.settings import LauncherConfig
from srcclr_ci.core.errors import DownloadError, LauncherError, MissingDependencyError
from srcclr_ci.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def log_runtime_options(config: LauncherConfig) -> None:
    LOGGER.debug("DEBUG is enabled")
    if config.use_cache:
        LOGGER.debug("NOCACHE is 0 or unset; cache will be used normally")
    else:
        LOGGER.debug("NOCACHE set to non-zero; cache will be ignored")
    LOGGER.debug(f'CACHE_DIR is "{config.cache_dir}"; archives will be saved and extracted into it')
    if config.no_scan:
        LOGGER.debug("NOSCAN is set to non-zero; scan will be skipped")
    else:
        LOGGER.debug("NOSCAN is 0 or unset; scan will be performed")


class LauncherRunner:
    """Orchestrates a single launcher run.

    The dependency check, the platform probe and the agent hand-off are
    injectable so the pipeline can be exercised without touching the host.
    """

    def __init__(
        self,
        platform_probe: Callable[[], PlatformInfo] = get_platform_info,
        agent_exec: Callable[[Path, Sequence[str]], int] = exec_agent,
        dependency_check: Callable[[Sequence[str]], None] = check_binaries,
    ) -> None:
        self._platform_probe = platform_probe
        self._agent_exec = agent_exec
        self._dependency_check = dependency_check

    def run(
        self,
        argv: Optional[Iterable[str]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> int:
        """Run the launcher.

        Args:
            argv: Arguments forwarded to the agent.
            environ: Environment to read options from (defaults to os.environ).

        Returns:
            Exit code.
        """
        args = list(argv) if argv is not None else []
        try:
            config = LauncherConfig.from_environ(os.environ if environ is None else environ)
        except LauncherError as e:
            configure_logging()
            LOGGER.error(str(e))
            return e.exit_code

        configure_logging(debug=config.debug)
        log_runtime_options(config)

        try:
            return self._launch(config, args)
        except (MissingDependencyError, DownloadError) as e:
            # already reported where they were raised
            return e.exit_code
        except LauncherError as e:
            LOGGER.error(str(e))
            return e.exit_code
        except KeyboardInterrupt:
            LOGGER.debug("interrupted; exiting")
            return EXIT_INTERRUPTED

    def prepare(self, config: LauncherConfig) -> CachePaths:
        """Run every stage up to (not including) the agent hand-off.

        Returns:
            Cache layout holding the extracted agent.
        """
        platform_info = self._platform_probe()
        paths = CachePaths(config.cache_dir)
        bundle = BundleManager(
            paths=paths,
            platform_id=platform_info.platform_id,
            base_url=config.download_base_url,
            use_cache=config.use_cache,
        )

        with scratch_directory() as workspace:
            resolution = resolve_version(config, paths, platform_info.platform_id, workspace)
            if not resolution.cached:
                bundle.download(
                    resolution.version,
                    workspace,
                    reuse_cached=resolution.source is VersionSource.OVERRIDE,
                )
            bundle.extract(resolution.version)
        return paths

    def _launch(self, config: LauncherConfig, args: Sequence[str]) -> int:
        self._dependency_check(required_binaries(config, args))
        paths = self.prepare(config)

        if config.no_scan:
            LOGGER.debug("run_scan: NOSCAN is set; returning")
            return EXIT_SUCCESS

        LOGGER.debug(f"run_scan entry: {' '.join(args)}")
        return self._agent_exec(paths.agent_bin, build_agent_args(config, args))


def main(argv: Optional[Iterable[str]] = None) -> int:
    """CLI entrypoint.

    Returns an exit code suitable for use as a console script.
    """
    return LauncherRunner().run(sys.argv[1:] if argv is None else argv)
