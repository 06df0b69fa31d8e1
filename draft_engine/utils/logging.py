"""Logging configuration for the draft engine CLI"""
import logging
import sys
from pathlib import Path
from typing import Optional


class ProductionFilter(logging.Filter):
    """Keep the console quiet outside of debug mode"""

    def filter(self, record):
        if record.levelno <= logging.DEBUG:
            return False

        # HTTP client chatter from the advisor
        if record.name.startswith('httpx') or record.name.startswith('httpcore'):
            return record.levelno >= logging.ERROR

        # Advisor declines are expected and already have a fallback
        if 'advisor' in record.name.lower():
            return record.levelno >= logging.ERROR

        return True


def setup_logging(debug: bool = False, log_file: Optional[Path] = None):
    """
    Configure logging for the application

    Args:
        debug: Enable debug logging
        log_file: Optional file to write logs to
    """
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    console_formatter = logging.Formatter('%(message)s')

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
    console_handler.setFormatter(console_formatter)

    if not debug:
        console_handler.addFilter(ProductionFilter())

    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger('httpx').setLevel(logging.ERROR)
    logging.getLogger('httpcore').setLevel(logging.ERROR)
    logging.getLogger('asyncio').setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name"""
    return logging.getLogger(name)
