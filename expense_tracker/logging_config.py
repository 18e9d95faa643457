import sys

from loguru import logger

from expense_tracker.config import Settings

_configured = False


def configure_logging(settings: Settings):
    """Install the stderr and rotating file sinks. Safe to call more than once."""
    global _configured
    if _configured:
        return

    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL)
    if settings.LOG_FILE:
        logger.add(settings.LOG_FILE, rotation=settings.LOG_ROTATION, level=settings.LOG_LEVEL)
    _configured = True
