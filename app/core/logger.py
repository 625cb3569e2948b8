import logging
from core.config import LOG_LEVEL

def get_logger(name: str):
    logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))
    logger = logging.getLogger(name)
    return logger

# Example usage: logger = get_logger(__name__)
