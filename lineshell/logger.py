#!/usr/bin/env python3
"""
lineshell Logging System
Centralized logging with optional file rotation, kept off the shell's output sink
"""

import logging
import os
import time
from logging.handlers import RotatingFileHandler
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


class LineShellLogger:
    """Centralized logging system for lineshell"""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if LineShellLogger._initialized:
            return

        # stderr only: stdout may be the shell's own output stream
        self.console = Console(stderr=True)
        self.logs_dir: Optional[Path] = None

        self.logger = logging.getLogger("lineshell")
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False
        self.logger.handlers.clear()

        self.console_handler = RichHandler(console=self.console, show_level=True, show_time=True)
        self.console_handler.setLevel(logging.WARNING)
        self.logger.addHandler(self.console_handler)

        self.file_handler: Optional[RotatingFileHandler] = None

        LineShellLogger._initialized = True

    def configure(self, level="WARNING", directory=None, max_size_mb=10, backup_count=5,
                  retention_days=7):
        """
        Apply logging settings; a directory enables the rotating file log
        and prunes log files older than retention_days (0 keeps them all)
        """
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
        self.console_handler.setLevel(level)

        if self.file_handler is not None:
            self.logger.removeHandler(self.file_handler)
            self.file_handler.close()
            self.file_handler = None

        if not directory:
            self.logs_dir = None
            return

        self.logs_dir = Path(directory)
        self.logs_dir.mkdir(parents=True, exist_ok=True)
        if retention_days:
            self.clear_old_logs(retention_days)
        log_file = self.logs_dir / f"lineshell_{datetime.now().strftime('%Y%m%d')}.log"
        self.file_handler = RotatingFileHandler(
            log_file,
            maxBytes=int(max_size_mb) * 1024 * 1024,
            backupCount=int(backup_count)
        )
        self.file_handler.setLevel(logging.DEBUG)
        self.file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        self.logger.addHandler(self.file_handler)

    def get_logger(self, name=None):
        """Get a logger instance"""
        if name:
            return logging.getLogger(f"lineshell.{name}")
        return self.logger

    def debug(self, message, **kwargs):
        self.logger.debug(message, **kwargs)

    def info(self, message, **kwargs):
        self.logger.info(message, **kwargs)

    def warning(self, message, **kwargs):
        self.logger.warning(message, **kwargs)

    def error(self, message, **kwargs):
        self.logger.error(message, **kwargs)

    def critical(self, message, **kwargs):
        self.logger.critical(message, **kwargs)

    def clear_old_logs(self, days=7):
        """Clear logs older than specified days"""
        if self.logs_dir is None:
            return
        current_time = time.time()
        for log_file in self.logs_dir.glob("*.log*"):
            if os.path.getmtime(log_file) < current_time - days * 86400:
                try:
                    os.remove(log_file)
                    self.info(f"Removed old log file: {log_file}")
                except OSError as e:
                    self.error(f"Failed to remove old log file: {e}")


# Singleton instance
logger = LineShellLogger()
