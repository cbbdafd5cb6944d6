"""Per-run scratch directory with guaranteed cleanup."""

from __future__ import annotations

import shutil
import signal
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from srcclr_ci.core.logging import get_logger

LOGGER = get_logger(__name__)

SCRATCH_PREFIX = "srcclr."


def _raise_exit(signum, frame) -> None:
    raise SystemExit(128 + signum)


@contextmanager
def scratch_directory(parent: Optional[Path] = None) -> Iterator[Path]:
    """Create a uniquely-named scratch directory and remove it on exit.

    The directory is removed on every exit path, including exceptions,
    ``KeyboardInterrupt`` and SIGTERM (which is converted into
    ``SystemExit(128 + SIGTERM)`` while the scope is active). The original
    exception or exit status propagates unchanged.

    Args:
        parent: Directory to create the scratch directory in (defaults to the
            system temp directory).

    Yields:
        Path to the scratch directory.
    """
    folder = Path(tempfile.mkdtemp(prefix=SCRATCH_PREFIX, dir=parent))
    LOGGER.debug(f"create_temp_folder: Using {folder} as temporary folder.")

    install_handler = threading.current_thread() is threading.main_thread()
    previous_handler = None
    if install_handler:
        previous_handler = signal.signal(signal.SIGTERM, _raise_exit)

    try:
        yield folder
    finally:
        if install_handler and previous_handler is not None:
            signal.signal(signal.SIGTERM, previous_handler)
        LOGGER.debug(f'create_temp_folder: cleanup: cleaning up "{folder}"')
        shutil.rmtree(folder, ignore_errors=True)
