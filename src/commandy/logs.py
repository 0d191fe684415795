from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from commandy.config import AppConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(config: AppConfig) -> None:
    if config.debug_logging:
        # Debug logging enabled - use rotating file handler
        log_file = Path(config.log_file).expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
        )
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT, handlers=[handler])
        logging.info("commandy starting on %s (debug logging enabled)", config.hostname)
    else:
        # Default: only warn+ so the TUI stays clean
        logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
