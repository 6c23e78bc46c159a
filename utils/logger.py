# utils/logger.py
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_NOISY_LOGGERS = ("httpx", "telegram", "asyncio")


def setup_logger(name: str,
                 level: Union[str, int, None] = None,
                 log_file: Optional[str] = "",
                 to_console: bool = True,
                 max_mb: Optional[int] = None,
                 backups: Optional[int] = None) -> logging.Logger:
    """
    Create/get a logger with console and rotating-file handlers.

    Unset arguments come from LOG_LEVEL, LOG_FILE, LOG_MAX_MB and LOG_BACKUPS,
    read at call time so values loaded from config.env apply. Pass
    ``log_file=None`` to skip the file handler. Re-using the same name returns
    the already configured logger.
    """
    logger = logging.getLogger(name)
    if logger.handlers:  # already configured
        return logger

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level)

    if log_file == "":
        log_file = os.getenv("LOG_FILE", "logs/paperbot.log")
    max_mb = max_mb if max_mb is not None else int(os.getenv("LOG_MAX_MB", "5"))
    backups = backups if backups is not None else int(os.getenv("LOG_BACKUPS", "5"))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    if log_file:
        if os.path.dirname(log_file):
            os.makedirs(os.path.dirname(log_file), exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_mb * 1024 * 1024,
            backupCount=backups,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    if to_console:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        stream_handler.setLevel(level)
        logger.addHandler(stream_handler)

    for noisy in _NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger
