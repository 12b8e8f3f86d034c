from __future__ import annotations

from datetime import UTC, datetime

import pytest

from profilesync.domain.editing import DraftStateStore, ReconciliationEngine, TraceEvent
from profilesync.domain.model import Language, SessionIdentity
from profilesync.domain.session import SessionProjector
from tests.support.gateway import FakeAccountGateway

FIXED_NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def identity() -> SessionIdentity:
    return SessionIdentity(
        id="64f1c0ffee",
        display_name="Ann",
        email="ann@x.com",
        credential="token-123",
        role="buyer",
        created_at=datetime(2024, 5, 4, tzinfo=UTC),
        push_notifications=True,
        email_notifications=False,
        language=Language.EN,
    )


@pytest.fixture
def session(identity: SessionIdentity) -> SessionProjector:
    return SessionProjector(identity)


@pytest.fixture
def store(identity: SessionIdentity) -> DraftStateStore:
    draft_store = DraftStateStore(clock=lambda: FIXED_NOW)
    draft_store.load_from(identity)
    return draft_store


@pytest.fixture
def gateway() -> FakeAccountGateway:
    return FakeAccountGateway()


@pytest.fixture
def trace_events() -> list[TraceEvent]:
    return []


@pytest.fixture
def engine(
    gateway: FakeAccountGateway,
    session: SessionProjector,
    trace_events: list[TraceEvent],
) -> ReconciliationEngine:
    return ReconciliationEngine(gateway=gateway, session=session, trace=trace_events.append)
