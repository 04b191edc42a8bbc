import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from elimina.config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# One daily log file shared by every engine logger
_file_handler: Optional[logging.FileHandler] = None

def _get_file_handler(formatter: logging.Formatter) -> logging.FileHandler:
    global _file_handler

    if _file_handler is None:
        log_dir = Path(Config.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)

        _file_handler = logging.FileHandler(
            log_dir / f'elimina_{datetime.now().strftime("%Y%m%d")}.log',
            encoding='utf-8'
        )
        _file_handler.setLevel(logging.DEBUG)
        _file_handler.setFormatter(formatter)

    return _file_handler

def setup_logger(name: str) -> logging.Logger:
    """
    Get a logger with the engine's formatting and handlers.

    Safe to call repeatedly with the same name: handlers are only attached
    the first time. Logs go to stdout, and also to <LOG_DIR>/elimina_YYYYMMDD.log
    unless LOG_TO_FILE is turned off.
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    log_level = logging.DEBUG if Config.DEBUG else logging.INFO
    logger.setLevel(log_level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if Config.LOG_TO_FILE:
        logger.addHandler(_get_file_handler(formatter))

    return logger
