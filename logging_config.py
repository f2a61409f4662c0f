"""
Logging setup for the API process.

``setup_logging`` attaches a single console handler to the root logger.
Calling it again is a no-op, so tests and repeated ``create_app`` calls do
not stack handlers.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger at ``level`` (case insensitive)."""
    logger = logging.getLogger()
    if logger.handlers:
        return

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console)

    # Motor/pymongo heartbeat chatter is only useful when debugging the driver
    logging.getLogger("pymongo").setLevel(logging.WARNING)
