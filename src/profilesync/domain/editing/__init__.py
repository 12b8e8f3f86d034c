"""Edit-and-reconcile core shared by the profile and settings editors."""

from __future__ import annotations

from .draft import DraftStateStore
from .engine import EngineState, ReconciliationEngine, SaveInProgressError
from .outcomes import (
    UNAUTHENTICATED,
    Confirmed,
    LocalFallback,
    Notice,
    NoticeLevel,
    PartialFailure,
    Rejected,
    SaveOutcome,
    SaveStatus,
)
from .stages import PROFILE_STAGE, SETTINGS_STAGE, SaveStage, stages_for
from .trace import TraceEvent, TraceHook, log_trace_event

__all__ = [
    "PROFILE_STAGE",
    "SETTINGS_STAGE",
    "UNAUTHENTICATED",
    "Confirmed",
    "DraftStateStore",
    "EngineState",
    "LocalFallback",
    "Notice",
    "NoticeLevel",
    "PartialFailure",
    "ReconciliationEngine",
    "Rejected",
    "SaveInProgressError",
    "SaveOutcome",
    "SaveStage",
    "SaveStatus",
    "TraceEvent",
    "TraceHook",
    "log_trace_event",
    "stages_for",
]
