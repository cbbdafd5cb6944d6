"""Environment-sourced launcher configuration.

All launcher options are read once, at startup, into an immutable
:class:`LauncherConfig` that is passed explicitly to every stage:

- ``CACHE_DIR``       where archives are cached and extracted
- ``DEBUG``           debug output from the launcher and the agent
- ``NOCACHE``         ignore cached archives and extractions
- ``NOSCAN``          download and extract the agent without running it
- ``SCAN_DIR``        directory to scan instead of the working directory
- ``SRCCLR_CI_JSON``  ask the agent for JSON output
- ``VERBOSE``         ask the agent for verbose output
- ``SRCCLR_VERSION``  pin an agent version (``VERSION`` is accepted as an alias)
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from srcclr_ci.core.errors import ConfigError

DEFAULT_DOWNLOAD_BASE_URL = "https://download.sourceclear.com"

_TRUE_WORDS = frozenset({"true", "yes", "on"})
_FALSE_WORDS = frozenset({"false", "no", "off"})


def parse_flag(name: str, value: Optional[str]) -> bool:
    """Interpret a numeric-style environment toggle.

    ``0``, empty or unset disable the option; any integer ``>= 1`` enables
    it. ``true``/``yes``/``on`` and ``false``/``no``/``off`` are accepted too.

    Raises:
        ConfigError: If the value cannot be interpreted.
    """
    if value is None:
        return False
    value = value.strip()
    if not value:
        return False
    try:
        return int(value) >= 1
    except ValueError:
        pass
    lowered = value.lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise ConfigError(f"{name} must be an integer, but was set to '{value}'")


@dataclass(frozen=True)
class LauncherConfig:
    """Immutable launcher options."""

    cache_dir: Path
    debug: bool = False
    no_cache: bool = False
    no_scan: bool = False
    scan_dir: Optional[str] = None
    json_output: bool = False
    verbose: bool = False
    version_override: Optional[str] = None
    download_base_url: str = DEFAULT_DOWNLOAD_BASE_URL

    @property
    def use_cache(self) -> bool:
        return not self.no_cache

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "LauncherConfig":
        """Build the configuration from ``environ`` (defaults to ``os.environ``).

        Raises:
            ConfigError: If a toggle holds an unrecognised value.
        """
        env = os.environ if environ is None else environ

        cache_dir = env.get("CACHE_DIR") or tempfile.gettempdir()
        version = (env.get("SRCCLR_VERSION") or env.get("VERSION") or "").strip()

        return cls(
            cache_dir=Path(cache_dir),
            debug=parse_flag("DEBUG", env.get("DEBUG")),
            no_cache=parse_flag("NOCACHE", env.get("NOCACHE")),
            no_scan=parse_flag("NOSCAN", env.get("NOSCAN")),
            scan_dir=env.get("SCAN_DIR") or None,
            json_output=parse_flag("SRCCLR_CI_JSON", env.get("SRCCLR_CI_JSON")),
            verbose=parse_flag("VERBOSE", env.get("VERBOSE")),
            version_override=version or None,
        )
