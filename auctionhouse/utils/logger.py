"""
Centralized logging configuration for the auction engine.

Provides colored console logging and separate loggers for the
subsystems (engine, bids, escrow, ranking, registry).
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import colorlog


class AuctionHouseLogger:
    """Centralized logger for engine components"""

    _initialized = False

    @classmethod
    def setup(
        cls,
        level: int = logging.INFO,
        log_dir: Optional[str] = None,
        log_to_file: bool = False,
    ):
        """
        Setup logging configuration.

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR)
            log_dir: Directory for the log file when log_to_file is set
            log_to_file: Whether to write logs to file
        """
        if cls._initialized:
            return

        root_logger = logging.getLogger("auctionhouse")
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        console_handler = colorlog.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_formatter = colorlog.ColoredFormatter(
            "%(log_color)s%(asctime)s [%(name)s] %(levelname)-8s%(reset)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        )
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

        if log_to_file:
            path = Path(log_dir or "logs")
            path.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(path / "auctionhouse.log")
            file_handler.setLevel(level)
            file_formatter = logging.Formatter(
                "%(asctime)s [%(name)s] %(levelname)-8s %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            file_handler.setFormatter(file_formatter)
            root_logger.addHandler(file_handler)

        cls._initialized = True

    @classmethod
    def reset(cls) -> None:
        """Drop installed handlers so setup() can run again."""
        root_logger = logging.getLogger("auctionhouse")
        for handler in root_logger.handlers:
            handler.close()
        root_logger.handlers.clear()
        cls._initialized = False

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Get a logger for a specific subsystem.

        Args:
            name: Subsystem name (e.g., 'engine', 'escrow', 'ranking')

        Returns:
            Logger instance
        """
        if not cls._initialized:
            cls.setup()

        return logging.getLogger(f"auctionhouse.{name}")


# Convenience functions
def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific subsystem"""
    return AuctionHouseLogger.get_logger(name)


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[str] = None,
    log_to_file: bool = False,
):
    """Setup logging configuration"""
    AuctionHouseLogger.setup(level=level, log_dir=log_dir, log_to_file=log_to_file)
