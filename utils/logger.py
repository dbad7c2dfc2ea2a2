import logging
from config.setting import LOG_LEVEL, LOG_FORMAT

logger = logging.getLogger("recommender")

if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(LOG_LEVEL.upper())


def log(message, level=logging.INFO):
    logger.log(level, message)
