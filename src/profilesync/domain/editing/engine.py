"""Optimistic save orchestration for account editors.

The engine runs the configured stages (profile before settings) against an
:class:`~profilesync.domain.ports.AccountGateway`, folds confirmed values back
into the editor's :class:`DraftStateStore` and the process-wide
:class:`SessionProjector`, and degrades to a local-only commit when the service
is absent or unreachable. Stages commit independently: a failing later stage
never rolls back an earlier one.

One save per engine may be in flight at a time. The post-save refresh runs as a
background task that can land after :meth:`ReconciliationEngine.save` returns;
:meth:`ReconciliationEngine.drain` waits for it.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from profilesync.domain.ports import GatewayError, ServerRejectedError

from .outcomes import UNAUTHENTICATED, Confirmed, LocalFallback, PartialFailure, Rejected
from .stages import PROFILE_STAGE, SETTINGS_STAGE, SaveStage
from .trace import TraceEvent, TraceHook, log_trace_event

if TYPE_CHECKING:
    from profilesync.domain.model import FieldGroup, FieldMap
    from profilesync.domain.ports import AccountGateway
    from profilesync.domain.session import SessionProjector

    from .draft import DraftStateStore
    from .outcomes import SaveOutcome

OutcomeListener = Callable[["SaveOutcome"], None]

log = getLogger(__name__)


class EngineState(StrEnum):
    IDLE = "idle"
    SAVING = "saving"


class SaveInProgressError(RuntimeError):
    """Raised when ``save`` is called while another save is still running."""


@dataclass(slots=True, kw_only=True)
class ReconciliationEngine:
    """Save an editor's draft through one or more remote stages."""

    gateway: AccountGateway
    session: SessionProjector
    stages: tuple[SaveStage, ...] = (PROFILE_STAGE, SETTINGS_STAGE)
    trace: TraceHook = log_trace_event

    state: EngineState = field(default=EngineState.IDLE, init=False)
    last_outcome: SaveOutcome | None = field(default=None, init=False)
    _listeners: list[OutcomeListener] = field(
        default_factory=list["OutcomeListener"], init=False, repr=False
    )
    _refreshes: set[asyncio.Task[None]] = field(
        default_factory=set["asyncio.Task[None]"], init=False, repr=False
    )

    def subscribe(self, listener: OutcomeListener) -> Callable[[], None]:
        """Call ``listener`` once with the outcome of every save."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def save(self, store: DraftStateStore, credential: str | None) -> SaveOutcome:
        if self.state is EngineState.SAVING:
            raise SaveInProgressError("A save is already in progress for this editor")

        self.state = EngineState.SAVING
        self._emit("save", EngineState.SAVING)
        try:
            outcome, refresh = await self._run(store, credential)
        finally:
            self.state = EngineState.IDLE

        self.last_outcome = outcome
        self._emit("save", outcome.status, detail=outcome.notice.message)
        log.info("Save finished: %s (%s)", outcome.status, outcome.notice.message)
        if refresh and credential:
            self._schedule_refresh(store, credential)
        for listener in tuple(self._listeners):
            listener(outcome)
        self._emit("save", EngineState.IDLE)
        return outcome

    async def drain(self) -> None:
        """Wait until every scheduled post-save refresh has finished."""

        while self._refreshes:
            await asyncio.gather(*tuple(self._refreshes))

    async def _run(
        self,
        store: DraftStateStore,
        credential: str | None,
    ) -> tuple[SaveOutcome, bool]:
        if credential is None or not credential.strip():
            self._emit("precondition", UNAUTHENTICATED)
            return Rejected(reason=UNAUTHENTICATED), False

        changes = store.changed_fields()
        if not changes:
            self._emit("payload", "empty")
            return Confirmed(server_fields=dict(store.original), network=False), False

        committed: list[FieldGroup] = []
        confirmed: FieldMap = {}
        for stage in self.stages:
            payload = stage.payload(changes)
            if not payload:
                continue

            self._emit(stage.name, "submitting", detail=",".join(sorted(payload)))
            try:
                accepted = await self._submit(stage, payload, credential)
            except GatewayError as exc:
                self._emit(stage.name, exc.kind, detail=str(exc))
                if committed:
                    log.warning(
                        "Stage %s failed after %s committed: %s", stage.name, committed, exc
                    )
                    failure = PartialFailure(
                        stage=stage.group,
                        reason=str(exc),
                        committed_stages=tuple(committed),
                    )
                    return failure, False
                return self._first_stage_failure(store, changes, stage, exc)

            applied = store.merge_remote(accepted)
            self._project(applied)
            confirmed.update(applied)
            committed.append(stage.group)
            self._emit(stage.name, "confirmed")

        return Confirmed(server_fields=confirmed), True

    async def _submit(self, stage: SaveStage, payload: FieldMap, credential: str) -> FieldMap:
        response = await self.gateway.update_profile(payload, credential)
        if not response.success:
            raise ServerRejectedError(response.message or f"{stage.name} update was not accepted")
        return stage.confirmed_fields(response, payload)

    def _first_stage_failure(
        self,
        store: DraftStateStore,
        changes: FieldMap,
        stage: SaveStage,
        error: GatewayError,
    ) -> tuple[SaveOutcome, bool]:
        if error.kind.is_soft:
            # Every changed group is kept locally; later stages are not attempted.
            committed = store.commit_local(changes)
            self._project(committed)
            log.warning("Account service unavailable (%s); committed locally", error.kind)
            return LocalFallback(reason=error.kind, committed_fields=committed), True

        details = error.details if isinstance(error, ServerRejectedError) else ()
        return Rejected(reason=error.kind, validation_errors=details, stage=stage.group), False

    def _project(self, fields: FieldMap) -> None:
        if not fields:
            return
        if self.session.identity is None:
            log.debug("No signed-in identity to project %s onto", sorted(fields))
            return
        self.session.update(fields)

    def _schedule_refresh(self, store: DraftStateStore, credential: str) -> None:
        task = asyncio.get_running_loop().create_task(self._refresh(store, credential))
        self._refreshes.add(task)
        task.add_done_callback(self._refreshes.discard)

    async def _refresh(self, store: DraftStateStore, credential: str) -> None:
        self._emit("refresh", "started")
        try:
            remote = await self.gateway.fetch_profile(credential)
            applied = store.merge_remote(remote.fields)
        except GatewayError as exc:
            log.warning("Post-save refresh failed (%s): %s", exc.kind, exc)
            self._emit("refresh", exc.kind, detail=str(exc))
            return
        except Exception as exc:
            log.exception("Post-save refresh crashed")
            self._emit("refresh", "error", detail=repr(exc))
            return
        self._emit("refresh", "merged", detail=",".join(sorted(applied)) or None)

    def _emit(self, stage: str, outcome: str, *, detail: str | None = None) -> None:
        self.trace(TraceEvent(stage=stage, outcome=str(outcome), detail=detail))
