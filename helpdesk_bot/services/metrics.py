"""
Metrics Tracker

Tracks performance metrics for the support pipeline:
- Response latency per agent
- Routing decisions
- Ticket creation success rate
- Knowledge retrieval hit rate
- Errors

The event log is bounded (most recent `max_events`, oldest evicted first).
Appends are serialized by a lock so concurrent requests can record safely;
eviction happens inside the same append.
"""
import json
import threading
import time
from collections import deque
from datetime import timedelta
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar, Union

from helpdesk_bot.config import get_settings
from helpdesk_bot.models.schemas import (
    AgentStats,
    MetricEvent,
    MetricsSummary,
    MetricType,
    utcnow,
)
from helpdesk_bot.utils.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()

T = TypeVar("T")


class MetricsTracker:
    """Bounded append-only metric event log with rolling summaries"""

    def __init__(self, max_events: int = 1000):
        self.max_events = max_events
        self._events: deque = deque(maxlen=max_events)
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------
    def record_latency(
        self,
        agent: str,
        duration_ms: float,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        self._add_event(MetricEvent(
            type=MetricType.LATENCY,
            agent=agent,
            duration_ms=duration_ms,
            success=True,
            metadata=metadata or {},
        ))

    def record_routing(
        self,
        predicted_agent: str,
        actual_agent: Optional[str],
        duration_ms: float
    ) -> None:
        """A routing decision is correct when no ground truth is known or it matches"""
        is_correct = actual_agent is None or predicted_agent == actual_agent
        self._add_event(MetricEvent(
            type=MetricType.ROUTING,
            agent=predicted_agent,
            duration_ms=duration_ms,
            success=is_correct,
            metadata={"predicted_agent": predicted_agent, "actual_agent": actual_agent},
        ))

    def record_ticket_creation(
        self,
        success: bool,
        ticket_id: Optional[int] = None,
        duration_ms: Optional[float] = None
    ) -> None:
        self._add_event(MetricEvent(
            type=MetricType.TICKET,
            success=success,
            duration_ms=duration_ms,
            metadata={"ticket_id": ticket_id},
        ))

    def record_retrieval(self, query: str, results_count: int, duration_ms: float) -> None:
        self._add_event(MetricEvent(
            type=MetricType.RETRIEVAL,
            duration_ms=duration_ms,
            success=results_count > 0,
            metadata={"query": query[:100], "results_count": results_count},
        ))

    def record_error(
        self,
        agent: str,
        error: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        self._add_event(MetricEvent(
            type=MetricType.ERROR,
            agent=agent,
            success=False,
            metadata={"error": error, **(metadata or {})},
        ))

    async def track(self, agent: str, fn: Callable[[], Awaitable[T]]) -> T:
        """
        Await `fn()` and record its latency under `agent`

        On failure an error event is recorded and the exception re-raised.
        """
        start = time.perf_counter()
        try:
            result = await fn()
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            self.record_error(agent, str(e), {"duration_ms": duration_ms})
            raise

        self.record_latency(agent, (time.perf_counter() - start) * 1000)
        return result

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------
    def get_summary(self, since: Optional[Union[timedelta, float]] = None) -> MetricsSummary:
        """
        Summary statistics over a lookback window

        Args:
            since: Lookback as timedelta or milliseconds (None or 0: all events)
        """
        events = self._snapshot()
        if since:
            if not isinstance(since, timedelta):
                since = timedelta(milliseconds=since)
            cutoff = utcnow() - since
            events = [e for e in events if e.timestamp >= cutoff]

        def of_type(metric_type: MetricType) -> List[MetricEvent]:
            return [e for e in events if e.type == metric_type]

        def success_rate(items: List[MetricEvent]) -> float:
            if not items:
                return 1.0
            return sum(1 for e in items if e.success) / len(items)

        latency_events = of_type(MetricType.LATENCY)
        error_events = of_type(MetricType.ERROR)

        avg_latency = (
            sum(e.duration_ms or 0 for e in latency_events) / len(latency_events)
            if latency_events else 0
        )

        total_requests = len(latency_events)
        error_rate = len(error_events) / total_requests if total_requests else 0.0

        agent_latencies: Dict[str, List[float]] = {}
        for event in latency_events:
            if event.agent:
                agent_latencies.setdefault(event.agent, []).append(event.duration_ms or 0)

        by_agent = {
            agent: AgentStats(
                count=len(latencies),
                avg_latency_ms=sum(latencies) / len(latencies),
            )
            for agent, latencies in agent_latencies.items()
        }

        return MetricsSummary(
            total_requests=total_requests,
            average_latency_ms=round(avg_latency),
            routing_accuracy=round(success_rate(of_type(MetricType.ROUTING)), 2),
            ticket_success_rate=round(success_rate(of_type(MetricType.TICKET)), 2),
            retrieval_hit_rate=round(success_rate(of_type(MetricType.RETRIEVAL)), 2),
            error_rate=round(error_rate, 2),
            by_agent=by_agent,
        )

    def get_recent_events(self, count: int = 10) -> List[MetricEvent]:
        """Most recent `count` events, oldest first"""
        events = self._snapshot()
        return events[-count:] if count > 0 else []

    def export_json(self) -> str:
        """Summary plus the full event log as JSON"""
        return json.dumps({
            "summary": self.get_summary().model_dump(mode="json"),
            "events": [e.model_dump(mode="json") for e in self._snapshot()],
        }, indent=2)

    def clear(self) -> None:
        """Drop all events (test hook)"""
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        return len(self._events)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _snapshot(self) -> List[MetricEvent]:
        with self._lock:
            return list(self._events)

    def _add_event(self, event: MetricEvent) -> None:
        with self._lock:
            self._events.append(event)

        if settings.fastapi_env == "development":
            logger.debug(f"[Metrics] {event.type.value}: {event.model_dump()}")
