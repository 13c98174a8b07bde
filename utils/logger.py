# utils/logger.py
# This file is part of Formulary - A Formula Expression Engine
#
# Logging utility for formula analysis with configurable levels

import logging
import sys
from enum import Enum
from typing import Optional

LOGGER_NAME = "formulary"


class LogLevel(Enum):
    """Log levels selectable from the command line."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING


class FormularyFormatter(logging.Formatter):
    """Bare messages for INFO, level-tagged lines for everything else."""

    def format(self, record):
        if record.levelno == logging.INFO:
            return record.getMessage()
        return f"[{record.levelname}] {record.getMessage()}"


class FormularyLogger:
    """Engine logger writing to stderr, with helpers for recurring engine events."""

    def __init__(self, level: LogLevel = LogLevel.INFO):
        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.handlers.clear()

        # stdout is reserved for command results
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(FormularyFormatter())
        self.logger.addHandler(handler)
        self.logger.propagate = False

        self.set_level(level)

    def set_level(self, level: LogLevel):
        self.logger.setLevel(level.value)
        for handler in self.logger.handlers:
            handler.setLevel(level.value)

    def debug(self, message: str):
        self.logger.debug(message)

    def info(self, message: str):
        self.logger.info(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def error(self, message: str):
        self.logger.error(message)

    def parse_fallback(self, expression: str, reason: str):
        """Log a formula that had to be scanned without an AST."""
        self.warning(f"AST parsing failed for '{expression}', falling back to simple scan: {reason}")

    def cycle_detected(self, name: str, depth: int):
        """Log a name that recurs on its own dependency path."""
        self.debug(f"    🔁 Circular reference to '{name}' at depth {depth}")

    def expansion_skipped(self, name: str, reason: str):
        """Log a variable node the layout engine did not expand."""
        self.debug(f"    ⏭️  Expansion of '{name}' skipped: {reason}")


_global_logger: Optional[FormularyLogger] = None


def get_logger() -> FormularyLogger:
    """Get or create the shared engine logger."""
    global _global_logger
    if _global_logger is None:
        _global_logger = FormularyLogger()
    return _global_logger


def configure_logging(verbose: bool = False, debug: bool = False):
    """Configure logging based on command line flags.

    Args:
        verbose: Enable verbose (INFO) output
        debug: Enable debug output (overrides verbose)
    """
    if debug:
        level = LogLevel.DEBUG
    elif verbose:
        level = LogLevel.INFO
    else:
        level = LogLevel.WARNING
    get_logger().set_level(level)
