"""Logging setup shared by multisense-reconfig entry points.

Usage:
    from shared.utils.logging_config import setup_logging

    setup_logging(component="reconfigure", debug=True)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Rotate at 5 MB, keep three old files
MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 3

DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent.parent / "logs"


def setup_logging(
    component: str | None = None,
    *,
    log_dir: str | Path | None = None,
    debug: bool = False,
) -> Path | None:
    """Route the root logger to stderr and, for a named component, to
    ``<log_dir>/<component>.log``.

    Replaces any handlers installed earlier, so an entry point may call it
    again after its settings are known. Returns the log file, or None when
    only stderr is used.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    log_file = None
    if component:
        target_dir = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
        target_dir.mkdir(parents=True, exist_ok=True)
        log_file = target_dir / f"{component}.log"
        handlers.append(RotatingFileHandler(log_file, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT))

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    if log_file:
        logging.getLogger(__name__).info("Logging %s to %s", component, log_file)
    return log_file
