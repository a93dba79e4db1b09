import logging
import os
from typing import Optional

import dotenv

from watchkit.utils import BASE_DIR

_env_loaded = False


def load_env():
    """Load a .env file from the working directory, once per process."""
    global _env_loaded
    if not _env_loaded:
        dotenv.load_dotenv(dotenv.find_dotenv(usecwd=True))
        _env_loaded = True


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off", "")


def setup_logger(
    name: str,
    log_file: str = "watchkit.log",
    level: Optional[int] = None,
    console: Optional[bool] = None,
    handler_level: Optional[int] = None,
) -> logging.Logger:
    """Configure and return a module-level logger.

    The log directory, default level and console output can be overridden with
    WATCHKIT_LOG_DIR, WATCHKIT_LOG_LEVEL and WATCHKIT_LOG_CONSOLE, set in the
    environment or in a .env file.
    """
    load_env()
    log_dir = os.getenv("WATCHKIT_LOG_DIR") or os.path.join(BASE_DIR, "logs")
    os.makedirs(log_dir, exist_ok=True)
    full_log_file_path = os.path.join(log_dir, log_file)

    if level is None:
        level = logging.getLevelName(os.getenv("WATCHKIT_LOG_LEVEL", "DEBUG").upper())
        if not isinstance(level, int):
            level = logging.DEBUG
    if console is None:
        console = _env_flag("WATCHKIT_LOG_CONSOLE", True)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        file_handler = logging.FileHandler(full_log_file_path)
        file_handler.setLevel(handler_level or level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        if console:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(handler_level or level)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

    return logger
