"""
Run notifications.

The pipeline publishes one event when a run ends. Subscribers (a chat bot,
a record-keeping sink) run as background tasks; the pipeline never waits on
them and their failures never reach it.
"""

import asyncio
import inspect
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set

from loguru import logger

from hookscope.video_pipeline.core.analysis.models import AnalysisResult


class EventType(Enum):
    ANALYSIS_COMPLETED = "analysis_completed"
    ANALYSIS_FAILED = "analysis_failed"


@dataclass
class PipelineEvent:
    run_id: str
    source: str
    owner_tag: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_type: EventType = None


@dataclass
class AnalysisCompletedEvent(PipelineEvent):
    result: AnalysisResult = None

    def __post_init__(self):
        self.event_type = EventType.ANALYSIS_COMPLETED

    @property
    def summary(self) -> Dict[str, Any]:
        return self.result.summary() if self.result else {}


@dataclass
class AnalysisFailedEvent(PipelineEvent):
    error: Exception = None
    stage: str = ""

    def __post_init__(self):
        self.event_type = EventType.ANALYSIS_FAILED


Handler = Callable[[PipelineEvent], Any]


class EventBus:
    def __init__(self):
        self._handlers: List[Handler] = []
        self._pending: Set[asyncio.Task] = set()

    def subscribe(self, handler: Handler) -> None:
        """Register a plain or async callable receiving every published event."""
        self._handlers.append(handler)

    def unsubscribe(self, handler: Handler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def publish(self, event: PipelineEvent) -> None:
        """Schedule every handler and return immediately. Must be called from a running loop."""
        for handler in list(self._handlers):
            task = asyncio.create_task(self._deliver(handler, event))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for in-flight deliveries; for shutdown hooks and tests."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @staticmethod
    async def _deliver(handler: Handler, event: PipelineEvent) -> None:
        name = getattr(handler, "__name__", repr(handler))
        try:
            outcome = handler(event)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception:
            logger.exception(f"Event handler {name} failed on {event.event_type.value}")
