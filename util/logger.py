# util/logger.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from config.settings import settings

logging.captureWarnings(True)

_INIT_FLAG = "_vibecoder_inited"
_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# Client libraries that log every round trip at DEBUG/INFO.
NOISY_LOGGERS = ("httpx", "httpcore", "redis", "asyncio")

_LEVEL_COLORS = {
    "DEBUG": "\033[37m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[41m",
}
_RESET = "\033[0m"


class ConsoleFormatter(logging.Formatter):
    """Colors the level name only; the record itself is left untouched for other handlers."""

    def format(self, record: logging.LogRecord) -> str:
        plain = record.levelname
        record.levelname = f"{_LEVEL_COLORS.get(plain, _RESET)}{plain}{_RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ConsoleFormatter(_FORMAT, datefmt=_DATE_FORMAT))
    return handler


def _file_handler(level: int) -> logging.Handler:
    os.makedirs(settings.LOG_DIR, exist_ok=True)
    handler = RotatingFileHandler(
        os.path.join(settings.LOG_DIR, settings.LOG_FILE_NAME),
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
    return handler


def init_logger() -> logging.Logger:
    """
    Idempotent: the first call installs the handlers, later calls just hand back
    the workspace logger.
    - stdout always, colored level names.
    - <LOG_DIR>/<LOG_FILE_NAME> with size-based rotation when LOG_TO_FILE is set.
    """
    root = logging.getLogger()
    if getattr(root, _INIT_FLAG, False):
        return logging.getLogger(settings.LOGGER_NAME)

    level = logging.getLevelName((settings.LOG_LEVEL or "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(_console_handler(level))
    if settings.LOG_TO_FILE:
        root.addHandler(_file_handler(level))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    setattr(root, _INIT_FLAG, True)
    logger = logging.getLogger(settings.LOGGER_NAME)
    logger.debug("logger.init level=%s file=%s", logging.getLevelName(level), settings.LOG_TO_FILE)
    return logger
