"""
Operation Hooks

Observability around the engine's public operations. Hooks receive one
``OperationEvent`` per call, successful or not.
"""

from dataclasses import dataclass
import logging
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationEvent:
    """A completed engine operation."""

    operation: str
    query: str
    outcome: str  # ok, empty, error, or a grouping outcome
    result_count: int = 0
    duration_ms: float = 0.0
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.outcome == "error"


OperationHook = Callable[[OperationEvent], None]


class LoggingHook:
    """Write one log line per operation."""

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def __call__(self, event: OperationEvent) -> None:
        if event.failed:
            self.log.warning(
                "%s query=%r failed after %.1fms: %s",
                event.operation, event.query, event.duration_ms, event.error,
            )
            return

        self.log.info(
            "%s query=%r outcome=%s results=%d (%.1fms)",
            event.operation, event.query, event.outcome,
            event.result_count, event.duration_ms,
        )

