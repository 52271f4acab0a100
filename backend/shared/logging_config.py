"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``; this only configures
the root handler once at application startup.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the API process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    # Stripe's own client logs every request at INFO
    logging.getLogger("stripe").setLevel(logging.WARNING)
