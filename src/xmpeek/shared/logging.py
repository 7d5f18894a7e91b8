"""Context-aware logging for the packet loading stages.

Wraps the standard library logger so that every record carries the stage
(component), an optional correlation id and any bound context, such as the
file being loaded, in its ``extra`` mapping.
"""

import logging
from typing import Any, Dict, Optional


class ContextLogger:
    """Logger that attaches component, correlation id and bound context."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize context logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional id tying together records of one load
            component: Stage name, defaults to the last part of ``name``
            context: Extra fields added to every record
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]
        self.context: Dict[str, Any] = dict(context or {})

    def bind(self, **context: Any) -> "ContextLogger":
        """Return a logger for the same stage with additional context."""
        merged = dict(self.context)
        merged.update(context)
        return ContextLogger(
            self.logger.name, self.correlation_id, self.component, merged
        )

    def _extra(self, extra: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        combined: Dict[str, Any] = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        combined.update(self.context)
        if extra:
            combined.update(extra)
        return combined

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.debug(message, extra=self._extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.info(message, extra=self._extra(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.warning(message, extra=self._extra(extra))

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False,
    ) -> None:
        """Log error message.

        Expected failures (missing markers, bad XML) are logged without a
        traceback; pass ``exc_info=True`` for unexpected ones.
        """
        self.logger.error(message, extra=self._extra(extra), exc_info=exc_info)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None,
) -> ContextLogger:
    """Get a context-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation id for one load attempt
        component: Stage name for structured logging

    Returns:
        ContextLogger instance
    """
    return ContextLogger(name, correlation_id, component)
