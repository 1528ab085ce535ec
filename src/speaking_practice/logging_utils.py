import logging
from typing import Optional

from .settings import LoggingSettings


def setup_logging(config: Optional[LoggingSettings] = None) -> logging.Logger:
    """
    Sets up the root logger based on the provided configuration.
    """
    if config is None:
        from .settings import settings

        config = settings.logging

    level = (config.level or "INFO").upper()
    logging.basicConfig(level=level, format=config.format)

    if config.file:
        file_handler = logging.FileHandler(config.file)
        file_handler.setFormatter(logging.Formatter(config.format))
        logging.getLogger().addHandler(file_handler)

    return logging.getLogger("speaking_practice")
