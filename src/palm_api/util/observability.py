"""Optional structured events and metrics for client operations."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any

from palm_api.util.logging import get_logger, normalize_level


@dataclass(frozen=True)
class ApiEvent:
    """Structured event describing one step of an API operation.

    Attributes:
        event_type: Machine-readable event name, e.g. ``palm.chat_completed``.
        timestamp: Unix timestamp in seconds.
        payload: Structured data associated with the event.
    """

    event_type: str
    timestamp: float
    payload: dict[str, Any]


class EventLogger:
    """Logger that emits one JSON document per event."""

    def __init__(self, logger_name: str = "palm_api.events") -> None:
        self._logger = get_logger(logger_name)

    def log(self, event_type: str, payload: dict[str, Any], *, level: str = "INFO") -> None:
        event = ApiEvent(event_type=event_type, timestamp=time.time(), payload=payload)
        self._logger.log(normalize_level(level), json.dumps(event.__dict__, sort_keys=True))


@dataclass
class MetricsCollector:
    """Collects counters and durations per operation."""

    counters: dict[str, int] = field(default_factory=dict)
    durations: dict[str, list[float]] = field(default_factory=dict)

    def increment(self, name: str, value: int = 1) -> None:
        self.counters[name] = self.counters.get(name, 0) + value

    def record_duration(self, name: str, duration_s: float) -> None:
        self.durations.setdefault(name, []).append(duration_s)

    def snapshot(self) -> dict[str, Any]:
        """Return counters and a count/total/average summary of durations."""

        duration_summary: dict[str, dict[str, float]] = {}
        for name, values in self.durations.items():
            total = sum(values)
            count = len(values)
            duration_summary[name] = {
                "count": float(count),
                "total_s": total,
                "avg_s": total / count if count else 0.0,
            }
        return {"counters": dict(self.counters), "durations": duration_summary}


@dataclass(frozen=True)
class ObservabilityManager:
    """Container for structured events and metrics."""

    events: EventLogger
    metrics: MetricsCollector

    def operation_started(self, operation: str, payload: dict[str, Any]) -> None:
        self.metrics.increment(f"palm.{operation}_calls")
        self.events.log(f"palm.{operation}_requested", payload)

    def operation_completed(
        self, operation: str, status: int, duration_s: float, payload: dict[str, Any]
    ) -> None:
        self.metrics.increment(f"palm.status.{status}")
        self.metrics.record_duration(f"palm.{operation}_duration", duration_s)
        self.events.log(
            f"palm.{operation}_completed",
            {**payload, "status": status, "duration_s": duration_s},
        )

    def operation_failed(self, operation: str, error: Exception, payload: dict[str, Any]) -> None:
        status = getattr(error, "status", None)
        if isinstance(status, int):
            self.metrics.increment(f"palm.status.{status}")
        self.metrics.increment(f"palm.{operation}_failures")
        self.events.log(
            f"palm.{operation}_failed",
            {**payload, "error": str(error), "error_type": type(error).__name__},
            level="WARNING",
        )


def create_observability_manager() -> ObservabilityManager:
    """Create a manager logging to ``palm_api.events`` with fresh metrics."""

    return ObservabilityManager(events=EventLogger(), metrics=MetricsCollector())
