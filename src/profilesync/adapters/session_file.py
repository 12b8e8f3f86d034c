"""Read-only restoration of a cached session.

Another component (the sign-in flow) writes ``session.json`` as
``{"token": ..., "user": {...}}``. This module only reads it and hands back a
:class:`SessionIdentity`; malformed or incomplete entries are treated as "no
session" rather than errors.
"""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from profilesync.adapters.account.schema import AccountBaseModel, UserPayload
from profilesync.adapters.account.translator import parse_remote_user
from profilesync.config.storage import get_storage_config
from profilesync.domain.session import identity_from_remote

if TYPE_CHECKING:
    from pathlib import Path

    from profilesync.domain.model import SessionIdentity

log = getLogger(__name__)

_INVALID_TOKENS = frozenset({"", "undefined", "null"})


class StoredSession(AccountBaseModel):
    token: str | None = None
    user: UserPayload | None = None


def load_stored_session(path: Path | None = None) -> SessionIdentity | None:
    """Return the cached identity, or ``None`` when there is no usable session."""

    session_path = path or get_storage_config().session_path()
    if not session_path.is_file():
        return None

    try:
        stored = StoredSession.model_validate(json.loads(session_path.read_text("utf-8")))
    except (OSError, ValueError, ValidationError):
        log.warning("Ignoring unreadable session cache at %s", session_path)
        return None

    return identity_from_stored(stored)


def identity_from_stored(stored: StoredSession) -> SessionIdentity | None:
    token = (stored.token or "").strip()
    user = stored.user
    if token in _INVALID_TOKENS or user is None or not user.id or not user.email:
        log.warning("Ignoring incomplete session cache entry")
        return None
    return identity_from_remote(parse_remote_user(user), credential=token)
