"""Process-wide identity of the signed-in user."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING

from .fields import DEFAULT_SETTINGS, FieldMap, FieldName, Language

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionIdentity:
    """Snapshot of the signed-in account plus its bearer credential.

    Instances are immutable; updates produce a new snapshot so readers never
    observe a half-applied change.
    """

    id: str
    display_name: str
    email: str
    credential: str | None = None
    role: str | None = None
    created_at: datetime | None = None
    push_notifications: bool = bool(DEFAULT_SETTINGS[FieldName.PUSH_NOTIFICATIONS])
    email_notifications: bool = bool(DEFAULT_SETTINGS[FieldName.EMAIL_NOTIFICATIONS])
    language: Language = Language.EN

    def editable_fields(self) -> FieldMap:
        return {name: getattr(self, name.value) for name in FieldName}

    def with_fields(self, updates: Mapping[str, object]) -> SessionIdentity:
        """Return a copy with ``updates`` shallow-merged; unknown keys are ignored."""

        known = {item.name for item in fields(self)}
        changes = {str(key): value for key, value in updates.items() if str(key) in known}
        if FieldName.LANGUAGE in changes:
            language = Language.parse(changes[FieldName.LANGUAGE])
            if language is None:
                changes.pop(FieldName.LANGUAGE)
            else:
                changes[FieldName.LANGUAGE] = language
        return replace(self, **changes)
