"""Agent invocation: argument assembly and process hand-off."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from typing import List, Sequence

from srcclr_ci.config.settings import LauncherConfig
from srcclr_ci.core.errors import AgentLaunchError
from srcclr_ci.core.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_ACTION = ("scan", "--allow-dirty")


def build_agent_args(config: LauncherConfig, args: Sequence[str]) -> List[str]:
    """Assemble the agent's argument vector.

    Order matters to the agent's parser: ``--debug`` goes before the action,
    while ``--loud``, ``--json`` and the scan directory follow it.

    Args:
        config: Launcher configuration.
        args: Arguments given to the launcher, forwarded verbatim.

    Returns:
        Arguments to pass to the agent (without the program name).
    """
    agent_args = list(args) if args else list(DEFAULT_ACTION)
    if config.debug:
        agent_args.insert(0, "--debug")
    if config.verbose:
        agent_args.append("--loud")
    if config.json_output:
        agent_args.append("--json")
    if config.scan_dir:
        agent_args.append(config.scan_dir)
    return agent_args


def exec_agent(binary: Path, args: Sequence[str]) -> int:
    """Transfer control to the agent.

    On POSIX the launcher process is replaced and this function does not
    return. Elsewhere the agent runs as a child process and its exit code is
    returned.

    Raises:
        AgentLaunchError: If the agent cannot be started.
    """
    argv = [str(binary), *args]
    LOGGER.debug(f'run_scan: running "{binary}" {" ".join(args)}')
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        if os.name != "posix":
            return subprocess.call(argv)
        os.execv(argv[0], argv)
    except OSError as e:
        raise AgentLaunchError(f"Failed to run {binary}: {e}") from e
    return 0
