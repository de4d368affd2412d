"""
Logging configuration for the steel framing generator.

Modules get their logger through ``get_logger(__name__)``. Applications call
``SteelFramingLogger.configure()`` once to send records to the console and,
optionally, to a timestamped log file. Below DEBUG sits a custom TRACE level
that records every fabrication operation appended to a member.
"""

import logging
import os
import sys
from datetime import datetime
from typing import List, Optional

CONSOLE_FORMAT = "%(name)s - %(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class SteelFramingLogger:
    """Root logger setup and the TRACE level."""

    TRACE_LEVEL = 5
    logging.addLevelName(TRACE_LEVEL, "TRACE")

    @staticmethod
    def _add_trace_method():
        """Add ``Logger.trace`` once per process."""
        if hasattr(logging.Logger, 'trace'):
            return

        def trace(self, message, *args, **kwargs):
            if self.isEnabledFor(SteelFramingLogger.TRACE_LEVEL):
                self._log(SteelFramingLogger.TRACE_LEVEL, message, args, **kwargs)

        logging.Logger.trace = trace

    @staticmethod
    def configure(
        debug_mode: bool = False,
        log_dir: str = "logs",
        log_to_file: bool = True,
    ) -> Optional[str]:
        """
        Replace the root logger's handlers with a console handler and,
        when ``log_to_file`` is set, a file handler under ``log_dir``.

        Args:
            debug_mode: Log at DEBUG instead of INFO
            log_dir: Directory for the log file, created if missing
            log_to_file: Also write records to a timestamped file

        Returns:
            Path to the log file, or None when logging to the console only
        """
        SteelFramingLogger._add_trace_method()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        handlers: List[logging.Handler] = [console_handler]

        log_file = None
        if log_to_file:
            os.makedirs(log_dir, exist_ok=True)
            log_file = os.path.join(
                log_dir, f"stud_network_{datetime.now():%Y%m%d_%H%M%S}.log"
            )
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
            handlers.append(file_handler)

        root_logger = logging.getLogger()
        root_logger.handlers[:] = handlers
        root_logger.setLevel(logging.DEBUG if debug_mode else logging.INFO)
        return log_file


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Logger for a module, with ``trace()`` available."""
    SteelFramingLogger._add_trace_method()
    logger = logging.getLogger(name)
    if level:
        logger.setLevel(level)
    return logger
