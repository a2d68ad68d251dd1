"""
Error handling utilities for the Pulse Discovery engine.

Bad input data is never fatal for the engine: malformed rows are skipped
and recorded here so operators can see how much of a pool was unusable.
"""

import functools
import traceback
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .logging import get_logger


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for classification."""

    CONFIGURATION = "configuration"
    PARSING = "parsing"
    DATA_VALIDATION = "data_validation"
    FILTERING = "filtering"
    SYSTEM = "system"


@dataclass
class ErrorInfo:
    """Information about an error occurrence."""

    timestamp: datetime
    component: str
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    exception_type: str
    traceback: str
    context: Dict[str, Any]


class ErrorTracker:
    """
    Tracks errors and provides statistics for monitoring.
    """

    def __init__(self, max_errors: int = 1000):
        """
        Initialize error tracker.

        Args:
            max_errors: Maximum number of errors to keep in memory
        """
        self.max_errors = max_errors
        self.errors: List[ErrorInfo] = []
        self.error_counts: Dict[str, int] = {}
        self.logger = get_logger("error_tracker")

    def record_error(
        self,
        component: str,
        category: ErrorCategory,
        severity: ErrorSeverity,
        message: str,
        exception: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> ErrorInfo:
        """
        Record an error occurrence.

        Args:
            component: Component where error occurred
            category: Error category
            severity: Error severity
            message: Error message
            exception: Exception object if available
            context: Additional context information

        Returns:
            ErrorInfo object
        """
        error_info = ErrorInfo(
            timestamp=datetime.now(),
            component=component,
            category=category,
            severity=severity,
            message=message,
            exception_type=type(exception).__name__ if exception else "Unknown",
            traceback=(
                "".join(traceback.format_exception(type(exception), exception, exception.__traceback__))
                if exception
                else ""
            ),
            context=context or {},
        )

        self.errors.append(error_info)
        if len(self.errors) > self.max_errors:
            self.errors.pop(0)

        error_key = f"{component}.{category.value}.{severity.value}"
        self.error_counts[error_key] = self.error_counts.get(error_key, 0) + 1

        self.logger.warning(
            f"Error recorded: {message}",
            extra={
                "component": component,
                "category": category.value,
                "severity": severity.value,
                "exception_type": error_info.exception_type,
                "context": context,
            },
        )

        return error_info

    def get_error_stats(self) -> Dict[str, Any]:
        """Get error statistics."""
        last_hour = datetime.now() - timedelta(hours=1)

        return {
            "total_errors": len(self.errors),
            "errors_last_hour": len([e for e in self.errors if e.timestamp >= last_hour]),
            "error_counts": self.error_counts.copy(),
            "severity_breakdown": {
                severity.value: len([e for e in self.errors if e.severity == severity])
                for severity in ErrorSeverity
            },
            "category_breakdown": {
                category.value: len([e for e in self.errors if e.category == category])
                for category in ErrorCategory
            },
        }

    def get_component_errors(self, component: str, limit: int = 10) -> List[ErrorInfo]:
        """Get recent errors for a specific component."""
        return [e for e in self.errors if e.component == component][-limit:]

    def clear(self):
        """Forget all recorded errors."""
        self.errors.clear()
        self.error_counts.clear()


_error_tracker: Optional[ErrorTracker] = None


def get_error_tracker() -> ErrorTracker:
    """Get global error tracker instance."""
    global _error_tracker
    if _error_tracker is None:
        _error_tracker = ErrorTracker()
    return _error_tracker


def with_error_handling(
    component: str,
    category: ErrorCategory,
    severity: ErrorSeverity = ErrorSeverity.MEDIUM,
    fallback_value: Any = None,
    suppress_exceptions: bool = False,
):
    """
    Decorator that records exceptions and optionally returns a fallback.

    Args:
        component: Component name
        category: Error category
        severity: Error severity
        fallback_value: Value to return on failure
        suppress_exceptions: Whether to suppress exceptions
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                get_error_tracker().record_error(
                    component=component,
                    category=category,
                    severity=severity,
                    message=f"Error in {func.__name__}: {str(e)}",
                    exception=e,
                    context={"function": func.__name__},
                )

                if suppress_exceptions:
                    get_logger(component).warning(
                        f"Suppressing exception in {func.__name__}: {str(e)}"
                    )
                    return fallback_value
                raise

        return wrapper

    return decorator
