"""
Logging configuration shared by the server, the bot and the dashboard client
"""

import logging
import sys
from typing import Optional
from pathlib import Path

from shared.config import settings

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = {
    'asyncpg': logging.WARNING,
    'aiogram.event': logging.WARNING,
    'openai': logging.WARNING,
    'httpx': logging.WARNING,
    'httpcore': logging.WARNING,
    'aiohttp.access': logging.WARNING,
}


def _resolve_level(level: Optional[str]) -> int:
    if level is None:
        level = 'DEBUG' if settings.DEBUG else settings.LOG_LEVEL
    return getattr(logging, str(level).upper(), logging.INFO)


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None
) -> None:
    """
    Configure the root logger

    Args:
        level: Log level name; defaults to LOG_LEVEL (DEBUG when DEBUG=true)
        log_file: Optional log file path; defaults to LOG_FILE
    """
    numeric_level = _resolve_level(level)
    if log_file is None:
        log_file = settings.LOG_FILE or None

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(quiet_level, numeric_level))

    root_logger.info(
        f"Logging configured: level={logging.getLevelName(numeric_level)}, "
        f"file={log_file or 'none'}, environment={settings.ENVIRONMENT}"
    )


# Configure logging on module import
if not logging.getLogger().handlers:
    setup_logging()
