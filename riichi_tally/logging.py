"""Root logger setup for the service, driven by ``Settings``."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from riichi_tally.config import Settings, settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

# client libraries log every request at INFO
QUIET_LOGGERS = ("httpx", "openai", "google", "urllib3")


def setup_logging(config: Settings | None = None) -> Path | None:
    """Configure stdout logging, plus a timestamped file under ``log_dir`` when set.

    Returns the log file path, or None when logging to stdout only.
    """
    config = config or settings
    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {config.log_level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    root_logger.addHandler(stdout_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    if not config.log_dir:
        return None

    dir_path = Path(config.log_dir)
    dir_path.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(tz=timezone.utc).strftime(LOG_FILE_TIMESTAMP_FORMAT)
    file_path = dir_path / f"riichi-tally_{stamp}.log"
    file_handler = logging.FileHandler(file_path, encoding="utf-8")
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)
    return file_path
