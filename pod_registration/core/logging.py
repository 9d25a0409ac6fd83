"""Logging configuration utilities for the Pod registration service."""
import logging
import os

# prefix for every named logger in this project
SERVICE_NAME = "Pod-Registration"


def setup_logging() -> None:
    """Configure root logging based on the LOG_LEVEL environment variable."""
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def get_logger(component: str) -> logging.Logger:
    """Return the logger for one component, e.g. ``get_logger("API")``."""
    return logging.getLogger(f"{SERVICE_NAME}.{component}")
