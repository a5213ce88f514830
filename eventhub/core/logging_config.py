"""
Logging setup for the API process.

``setup_logging`` attaches a single console handler to the root logger.
Calling it again is a no-op, so tests and repeated imports of
``eventhub.main`` do not duplicate output.
"""

import logging


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once."""
    logger = logging.getLogger()
    if logger.handlers:
        return

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Third-party noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
