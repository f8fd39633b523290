import logging
import sys

from environs import Env

env = Env()
env.read_env()

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def _resolve_level() -> int:
    if env.bool("DEBUG", False):
        return logging.DEBUG
    level = logging.getLevelName(env.str("LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(_resolve_level())
        logger.propagate = False
    return logger
