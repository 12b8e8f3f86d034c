"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from profilesync.adapters.account import HttpAccountGateway
from profilesync.adapters.session_file import load_stored_session
from profilesync.config import get_account_config, require_env_vars
from profilesync.domain.editing import (
    DraftStateStore,
    ReconciliationEngine,
    log_trace_event,
    stages_for,
)
from profilesync.domain.model import FieldGroup
from profilesync.domain.ports import GatewayError
from profilesync.domain.session import SessionProjector, identity_from_remote

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from profilesync.config import AccountServiceConfig
    from profilesync.domain.editing import SaveOutcome, TraceHook
    from profilesync.domain.model import FieldName, FieldValue, SessionIdentity
    from profilesync.domain.ports import AccountGateway

log = getLogger(__name__)

ALL_GROUPS = (FieldGroup.PROFILE, FieldGroup.SETTINGS)


@dataclass(slots=True)
class AccountEditor:
    """One open editor: its draft store and the engine that saves it."""

    session: SessionProjector
    engine: ReconciliationEngine
    groups: tuple[FieldGroup, ...] = ALL_GROUPS
    store: DraftStateStore = field(default_factory=DraftStateStore)

    @classmethod
    def open(
        cls,
        session: SessionProjector,
        gateway: AccountGateway,
        *,
        groups: Iterable[FieldGroup] = ALL_GROUPS,
        trace: TraceHook = log_trace_event,
    ) -> AccountEditor:
        stages = stages_for(groups)
        editor = cls(
            session=session,
            engine=ReconciliationEngine(
                gateway=gateway,
                session=session,
                stages=stages,
                trace=trace,
            ),
            groups=tuple(stage.group for stage in stages),
        )
        editor.reload()
        return editor

    def reload(self) -> None:
        """Reseed the draft from the current session identity."""

        identity = self.session.identity
        if identity is None:
            raise RuntimeError("Cannot open an editor without a signed-in identity")
        self.store.load_from(identity, self.groups)

    async def refresh(self) -> None:
        """Overlay the service's copy of the account, then reseed the draft.

        When the service is absent or unreachable the cached identity is kept;
        every other gateway failure propagates.
        """

        credential = self.session.credential
        if credential:
            try:
                remote = await self.engine.gateway.fetch_profile(credential)
            except GatewayError as exc:
                if not exc.kind.is_soft:
                    raise
                log.warning("Editing cached account; service unavailable (%s)", exc.kind)
            else:
                self.session.update(remote.fields)
        self.reload()

    def set_field(self, key: FieldName | str, value: FieldValue) -> None:
        self.store.set_field(key, value)

    def is_dirty(self) -> bool:
        return self.store.is_dirty()

    def revert(self) -> None:
        self.store.revert()

    async def save(self) -> SaveOutcome:
        return await self.engine.save(self.store, self.session.credential)


def build_gateway(config: AccountServiceConfig | None = None) -> HttpAccountGateway:
    return HttpAccountGateway(config=config or get_account_config())


async def restore_session(
    gateway: AccountGateway,
    *,
    token: str | None = None,
    session_path: Path | None = None,
) -> SessionProjector:
    """Rebuild the process-wide session from the cache, or from the service.

    An explicit ``token`` overrides the cached credential. Without any cached
    identity the account is fetched with the token.
    """

    identity: SessionIdentity | None = load_stored_session(session_path)
    if identity is not None and token:
        identity = identity.with_fields({"credential": token})

    if identity is None:
        credential = token or require_env_vars(("ACCOUNT_API_TOKEN",))["ACCOUNT_API_TOKEN"]
        remote = await gateway.fetch_profile(credential)
        identity = identity_from_remote(remote, credential=credential)
        log.info("Loaded account %s from the account service", identity.id or "<unknown>")

    return SessionProjector(identity)


async def edit_account_async(
    changes: Mapping[FieldName, FieldValue],
    *,
    gateway: AccountGateway,
    token: str | None = None,
    groups: Iterable[FieldGroup] = ALL_GROUPS,
    session_path: Path | None = None,
    trace: TraceHook = log_trace_event,
) -> tuple[SaveOutcome, SessionProjector]:
    session = await restore_session(gateway, token=token, session_path=session_path)
    editor = AccountEditor.open(session, gateway, groups=groups, trace=trace)
    await editor.refresh()
    for key, value in changes.items():
        editor.set_field(key, value)

    outcome = await editor.save()
    await editor.engine.drain()
    return outcome, session


def edit_account(
    changes: Mapping[FieldName, FieldValue],
    *,
    gateway: AccountGateway | None = None,
    token: str | None = None,
    groups: Iterable[FieldGroup] = ALL_GROUPS,
    session_path: Path | None = None,
) -> SaveOutcome:
    """Apply ``changes`` to the signed-in account and wait for the refresh."""

    config = get_account_config()
    outcome, _session = asyncio.run(
        edit_account_async(
            changes,
            gateway=gateway or build_gateway(config),
            token=token or config.token,
            groups=groups,
            session_path=session_path,
        )
    )
    return outcome


async def show_account_async(
    *,
    gateway: AccountGateway,
    token: str | None = None,
    session_path: Path | None = None,
) -> SessionIdentity:
    session = await restore_session(gateway, token=token, session_path=session_path)
    cached = session.identity
    if cached is None:
        raise RuntimeError("No account identity could be restored")
    if cached.credential is None:
        return cached
    try:
        remote = await gateway.fetch_profile(cached.credential)
    except GatewayError as exc:
        if not exc.kind.is_soft:
            raise
        log.warning("Showing cached account; service unavailable (%s)", exc.kind)
        return cached
    return cached.with_fields(remote.fields)


def show_account(
    *,
    gateway: AccountGateway | None = None,
    token: str | None = None,
    session_path: Path | None = None,
) -> SessionIdentity:
    """Return the account as currently reported by the service."""

    config = get_account_config()
    return asyncio.run(
        show_account_async(
            gateway=gateway or build_gateway(config),
            token=token or config.token,
            session_path=session_path,
        )
    )
