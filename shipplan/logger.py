import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from . import settings


def setup_logger(
    name: str = "shipplan", log_level: Optional[int] = None, log_dir: Optional[Path] = None
) -> logging.Logger:
    """
    Configures the package logger with console (StreamHandler) and file (RotatingFileHandler) output.
    Entry points call this once; modules just use logging.getLogger(__name__) and propagate here.
    """
    level = log_level if log_level is not None else logging.getLevelName(settings.LOG_LEVEL)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Prevent adding handlers multiple times if logger is already set up
    if logger.handlers:
        return logger

    # Operators read the console; the file keeps the detail for later.
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    log_dir = Path(log_dir) if log_dir is not None else settings.LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_dir / "shipplan.log", maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"  # 5 MB
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(file_handler)

    return logger
