"""Process-wide session identity holder."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from profilesync.domain.model import SessionIdentity

if TYPE_CHECKING:
    from collections.abc import Mapping

    from profilesync.domain.ports import RemoteUser

IdentityListener = Callable[["SessionIdentity | None"], None]

log = getLogger(__name__)


class SessionProjector:
    """Holds the current :class:`SessionIdentity` and fans out changes.

    The reconciliation engine is the only writer during a session; sign-in and
    sign-out happen outside the editing core. Every write swaps in a new frozen
    snapshot before listeners run, so readers only ever see complete states.
    """

    def __init__(self, identity: SessionIdentity | None = None) -> None:
        self._identity = identity
        self._listeners: list[IdentityListener] = []

    @property
    def identity(self) -> SessionIdentity | None:
        return self._identity

    @property
    def credential(self) -> str | None:
        return self._identity.credential if self._identity is not None else None

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def sign_in(self, identity: SessionIdentity) -> None:
        self._publish(identity)

    def sign_out(self) -> None:
        self._publish(None)

    def update(self, fields: Mapping[str, object]) -> SessionIdentity:
        """Shallow-merge ``fields`` into the current identity."""

        if self._identity is None:
            raise RuntimeError("Cannot update session identity before sign-in")
        updated = self._identity.with_fields(fields)
        self._publish(updated)
        log.debug("Session identity updated: %s", sorted(str(key) for key in fields))
        return updated

    def _publish(self, identity: SessionIdentity | None) -> None:
        self._identity = identity
        for listener in tuple(self._listeners):
            listener(identity)


def identity_from_remote(remote: RemoteUser, *, credential: str | None) -> SessionIdentity:
    """Build an identity from an account reported by the service.

    Settings the account does not carry keep their defaults.
    """

    base = SessionIdentity(
        id=remote.id or "",
        display_name="",
        email="",
        credential=credential,
        role=remote.role,
        created_at=remote.created_at,
    )
    return base.with_fields(remote.fields)
