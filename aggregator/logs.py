from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def configure_logging(level: Union[int, str] = logging.INFO, log_path: Optional[Path] = None) -> logging.Logger:
    """Attach stream (and optional file) handlers to the package loggers.

    Idempotent: previously installed handlers are dropped.
    """
    logger = logging.getLogger("aggregator")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    fmt = logging.Formatter(LOG_FORMAT)

    if log_path is not None:
        path = Path(log_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(fmt)
        logger.addHandler(file_handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(fmt)
    logger.addHandler(stream_handler)

    # infra.* (retry) logs under its own root; route it the same way.
    infra = logging.getLogger("infra")
    infra.setLevel(level)
    infra.handlers[:] = list(logger.handlers)
    infra.propagate = False

    return logger
