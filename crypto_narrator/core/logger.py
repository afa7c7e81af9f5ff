"""Logging infrastructure setup."""

import logging
from pathlib import Path


def setup_logger(
    name: str = "crypto_narrator",
    log_file: str = "output/narrator.log",
    level: int = logging.INFO,
) -> logging.Logger:
    """
    Configure and return the narrator logger, writing to a file and the console.

    Args:
        name (str): The name of the logger.
        log_file (str): The path to the log file.
        level (int): Initial logging level.

    Returns:
        logging.Logger: The configured logger instance.
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)

    # Avoid adding multiple handlers if setup is called multiple times
    if logger.handlers:
        return logger

    logger.setLevel(level)

    # Timestamp, level, module.function, message
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(module)s.%(funcName)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


def set_level(level_name: str) -> None:
    """Apply a level name from config (``"DEBUG"``, ``"INFO"``...) to the shared logger."""
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        logger.warning(f"Unknown log level {level_name!r}; keeping {logging.getLevelName(logger.level)}")
        return
    logger.setLevel(level)


logger = setup_logger()
