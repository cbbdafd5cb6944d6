from __future__ import annotations

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(levelname)s: %(message)s"


class _LowercaseLevelFormatter(logging.Formatter):
    """Render level names the way shell tools do (``warning: ...``)."""

    def format(self, record: logging.LogRecord) -> str:
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = record.levelname.lower()
        return super().format(record)


def configure_logging(*, debug: bool = False) -> None:
    """Configure root logging level for the launcher.

    - debug → DEBUG
    - default → WARNING (warnings and errors only)
    """

    level = logging.DEBUG if debug else logging.WARNING

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_LowercaseLevelFormatter(LOG_FORMAT))
    logging.basicConfig(level=level, handlers=[handler])
    logging.getLogger().setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger."""

    return logging.getLogger(name if name is not None else __name__)
