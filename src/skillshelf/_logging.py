import logging
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Set the root log level from ``level`` or the LOG_LEVEL environment variable.

    The CLI calls this once per invocation; handlers are only installed when
    none exist yet, so repeated calls just change the level.
    """
    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if not logging.root.handlers:
        logging.basicConfig(level=log_level, format=LOG_FORMAT)
    else:
        logging.root.setLevel(log_level)
