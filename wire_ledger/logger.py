import logging
import sys
from logging.handlers import RotatingFileHandler
from . import settings


def setup_logger(name: str = None, log_level: int | str = None) -> logging.Logger:
    """
    Sets up a logger with both console (StreamHandler) and file (RotatingFileHandler) output.
    The level defaults to LOG_LEVEL from the environment.
    """
    logger = logging.getLogger(name)
    level = log_level if log_level is not None else settings.LOG_LEVEL
    logger.setLevel(level)

    # Prevent adding handlers multiple times if logger is already set up
    if logger.hasHandlers():
        return logger

    # Formatters
    console_format = logging.Formatter("%(message)s")  # Ledger tables print cleanly
    file_format = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # 1. Console Handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # 2. File Handler
    settings.LOG_DIR.mkdir(parents=True, exist_ok=True)
    log_file = settings.LOG_DIR / settings.LOG_FILENAME

    file_handler = RotatingFileHandler(
        log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"  # 5 MB
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)

    return logger
