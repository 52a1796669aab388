import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def setup_logger(log_file: Optional[str] = None, level: Optional[str] = None,
                 max_bytes: int = 10_000_000, backup_count: int = 5, name: Optional[str] = None):
    log_file = log_file or os.getenv("LOG_FILE")
    level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()

    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    # Unknown level names fall back to INFO instead of failing the import.
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"
    logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT)
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        Path(log_file).parent.mkdir(exist_ok=True, parents=True)
        handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
