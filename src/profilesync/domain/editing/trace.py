"""Structured trace events emitted at each save state transition."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger

trace_log = getLogger("profilesync.trace")


@dataclass(frozen=True, slots=True, kw_only=True)
class TraceEvent:
    """One transition: ``stage`` names the step, ``outcome`` what happened."""

    stage: str
    outcome: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    detail: str | None = None


TraceHook = Callable[[TraceEvent], None]


def log_trace_event(event: TraceEvent) -> None:
    trace_log.info(
        "stage=%s outcome=%s at=%s%s",
        event.stage,
        event.outcome,
        event.timestamp.isoformat(),
        f" detail={event.detail}" if event.detail else "",
    )
