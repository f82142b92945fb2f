# util/logger.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from config.settings import settings

logging.captureWarnings(True)

TEXT_FMT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
DATE_FMT = "%Y-%m-%dT%H:%M:%S%z"


class ColoredFormatter(logging.Formatter):
    COLORS = {
        "DEBUG": "\033[37m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[41m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Colour a copy so file handlers sharing the record stay plain.
        if getattr(record, "_colorize", False):
            record = logging.makeLogRecord(record.__dict__)
            lvl = record.levelname
            record.levelname = f"{self.COLORS.get(lvl, self.RESET)}{lvl}{self.RESET}"
        return super().format(record)


class _ConsoleHandler(logging.StreamHandler):
    def emit(self, record: logging.LogRecord) -> None:
        record._colorize = True  # type: ignore[attr-defined]
        super().emit(record)


def _level() -> int:
    return getattr(logging, (settings.LOG_LEVEL or "INFO").upper(), logging.INFO)


def init_logger() -> logging.Logger:
    """
    Idempotent logger init:
    - Console handler on stdout with coloured level names.
    - Rotating file handler under LOG_DIR when LOG_TO_FILE is set.
    - Level from LOG_LEVEL; chatty third-party loggers are capped.
    """
    root = logging.getLogger()
    if getattr(root, "_portfolio_inited", False):
        return logging.getLogger(settings.LOGGER_NAME)

    level = _level()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    console = _ConsoleHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(ColoredFormatter(TEXT_FMT, datefmt=DATE_FMT))
    root.addHandler(console)

    if settings.LOG_TO_FILE:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        fh = RotatingFileHandler(
            os.path.join(settings.LOG_DIR, settings.LOG_FILE_NAME),
            maxBytes=settings.LOG_MAX_BYTES,
            backupCount=settings.LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(TEXT_FMT, datefmt=DATE_FMT))
        root.addHandler(fh)

    for noisy in ("httpx", "redis", "fastapi_limiter", "python_multipart"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)

    root._portfolio_inited = True  # type: ignore[attr-defined]
    logger = logging.getLogger(settings.LOGGER_NAME)
    logger.debug("logger.init level=%s file=%s", level, settings.LOG_TO_FILE)
    return logger
