"""
Process-wide logging setup.

Every module asks for its logger through LoggerSingleton.get_logger(__name__).
The first call configures the root logger once:

- LOGGING_ENV=production logs WARNING and above, anything else INFO
- LoggingtoFile=true adds a rotating file in LOG_DIR (default ./logs)
- driver and HTTP client loggers are held at WARNING
"""

import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from os import environ as env
from typing import Dict, Optional

from dotenv import find_dotenv, load_dotenv

if env.get('USE_DOTENV', 'true').lower() == 'true':
    ENV_FILE = find_dotenv(usecwd=True)
    if ENV_FILE:
        load_dotenv(ENV_FILE)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE_MAX_BYTES = 30 * 1024 * 1024
LOG_FILE_BACKUPS = 5

QUIET_LOGGERS = (
    'httpx',
    'httpcore',
    'openai',
    'pymongo',
    'pymongo.topology',
    'pymongo.connection',
    'pymongo.serverSelection',
    'pymongo.command',
    'uvicorn.access',
    'asyncio',
)


def log_level() -> int:
    if env.get('LOGGING_ENV', 'development').lower() == 'production':
        return logging.WARNING
    return logging.INFO


def _file_handler(formatter: logging.Formatter, level: int) -> Optional[logging.Handler]:
    log_dir = env.get('LOG_DIR', 'logs')
    day = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    try:
        os.makedirs(log_dir, exist_ok=True)
        handler = RotatingFileHandler(
            os.path.join(log_dir, f'repair_planner_{day}.log'),
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
        )
    except OSError as e:
        logging.getLogger(__name__).warning(f"File logging disabled, cannot open log in {log_dir}: {e}")
        return None
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


class LoggerSingleton:
    _instance = None
    _loggers: Dict[str, logging.Logger] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._configure()
        return cls._instance

    def _configure(self):
        level = log_level()
        root = logging.getLogger()
        root.setLevel(level)

        if root.handlers:
            # uvicorn or pytest got there first; keep their handlers at our level
            for handler in root.handlers:
                handler.setLevel(level)
        else:
            formatter = logging.Formatter(LOG_FORMAT)
            console = logging.StreamHandler()
            console.setLevel(level)
            console.setFormatter(formatter)
            root.addHandler(console)

            if env.get('LoggingtoFile', 'false').lower() == 'true':
                handler = _file_handler(formatter, level)
                if handler is not None:
                    root.addHandler(handler)

        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        cls()
        if name not in cls._loggers:
            logger = logging.getLogger(name)
            logger.setLevel(log_level())
            cls._loggers[name] = logger
        return cls._loggers[name]
