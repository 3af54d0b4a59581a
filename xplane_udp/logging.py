"""Logging configuration helpers."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from .config import LoggingConfig

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Receives one INFO record per inbound datagram.
DATAGRAM_LOGGER_NAME = "xplane_udp.datagrams"


def configure_logging(config: LoggingConfig) -> None:
    """Configure root logging handlers from the ``[logging]`` section.

    A console handler is always installed. ``config.path`` adds a size-rotated
    log file, and ``config.log_datagrams`` controls whether the monitor's
    per-datagram hex dumps are emitted at INFO.
    """

    logging.captureWarnings(True)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    logging.basicConfig(
        level=getattr(logging, config.level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )

    if config.path:
        config.path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)

    logging.getLogger(DATAGRAM_LOGGER_NAME).setLevel(
        logging.NOTSET if config.log_datagrams else logging.WARNING
    )
