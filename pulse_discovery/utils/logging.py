"""
Structured logging utilities for the Pulse Discovery engine.

This module provides logging configuration with structured JSON payloads,
rotating log files, and per-component loggers.
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

ROOT_LOGGER_NAME = "pulse_discovery"


class ComponentLogger:
    """
    Structured logger for engine components.

    Every message is emitted as a JSON object carrying the component name
    and any bound context.
    """

    def __init__(self, component_name: str, extra_context: Optional[Dict[str, Any]] = None):
        """
        Initialize component logger.

        Args:
            component_name: Name of the component (e.g. 'deal.filter', 'discovery.service')
            extra_context: Additional context to include in all log messages
        """
        self.component_name = component_name
        self.extra_context = extra_context or {}
        self.logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{component_name}")

    def _format_message(self, message: str, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Format log message with structured data."""
        log_data = {
            "timestamp": datetime.now().isoformat(),
            "component": self.component_name,
            "message": message,
            **self.extra_context,
        }

        if extra:
            log_data.update(extra)

        return log_data

    def _emit(self, level: int, message: str, extra: Optional[Dict[str, Any]], exc_info: bool = False):
        log_data = self._format_message(message, extra)
        if exc_info:
            log_data["exception"] = True
        self.logger.log(level, json.dumps(log_data, default=str), exc_info=exc_info)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit(logging.DEBUG, message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit(logging.INFO, message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit(logging.WARNING, message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None, exc_info: bool = False):
        self._emit(logging.ERROR, message, extra, exc_info)


class LoggingManager:
    """
    Centralized logging configuration.

    Sets up console output and rotating log files for the package logger.
    """

    def __init__(self, log_dir: str = "logs", log_level: str = "INFO", log_to_file: bool = True):
        """
        Initialize logging manager.

        Args:
            log_dir: Directory for log files
            log_level: Default log level
            log_to_file: Whether to write rotating log files
        """
        self.log_dir = Path(log_dir)
        self.log_level = getattr(logging, log_level.upper())
        self.log_to_file = log_to_file
        self.component_loggers: Dict[str, ComponentLogger] = {}

        if self.log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        self._setup_logging()

    def _setup_logging(self):
        """Attach handlers to the package logger."""
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(self.log_level)
        root_logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        if not self.log_to_file:
            return

        file_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / "pulse_discovery.log",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        file_handler.setLevel(self.log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / "errors.log",
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        root_logger.addHandler(error_handler)

    def get_component_logger(
        self, component_name: str, extra_context: Optional[Dict[str, Any]] = None
    ) -> ComponentLogger:
        """Get or create a component logger."""
        cache_key = f"{component_name}_{hash(str(extra_context))}"

        if cache_key not in self.component_loggers:
            self.component_loggers[cache_key] = ComponentLogger(component_name, extra_context)

        return self.component_loggers[cache_key]

    def set_log_level(self, level: str):
        """Set log level for the package logger and its handlers."""
        log_level = getattr(logging, level.upper())
        self.log_level = log_level

        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(log_level)

        for handler in root_logger.handlers:
            # The error file stays at ERROR
            if getattr(handler, "baseFilename", "").endswith("errors.log"):
                continue
            handler.setLevel(log_level)


_logging_manager: Optional[LoggingManager] = None


def setup_logging(log_dir: str = "logs", log_level: str = "INFO", log_to_file: bool = True) -> LoggingManager:
    """
    Setup global logging configuration.

    Args:
        log_dir: Directory for log files
        log_level: Default log level
        log_to_file: Whether to write rotating log files

    Returns:
        LoggingManager instance
    """
    global _logging_manager
    _logging_manager = LoggingManager(log_dir, log_level, log_to_file)
    return _logging_manager


def get_logger(component_name: str, extra_context: Optional[Dict[str, Any]] = None) -> ComponentLogger:
    """
    Get a component logger.

    Logging is not configured implicitly; without ``setup_logging`` the
    logger simply propagates to whatever the host application configured.
    """
    if _logging_manager is None:
        return ComponentLogger(component_name, extra_context)

    return _logging_manager.get_component_logger(component_name, extra_context)
