"""Translate between account service payloads and domain field maps."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from profilesync.domain.model import FieldName, Language
from profilesync.domain.ports import RemoteUser

from .schema import NotificationsPayload, PreferencesPayload, ProfileUpdateRequest

if TYPE_CHECKING:
    from collections.abc import Mapping

    from profilesync.domain.model import FieldMap, FieldValue

    from .schema import UserPayload

log = getLogger(__name__)


def build_update_request(fields: Mapping[FieldName, FieldValue]) -> ProfileUpdateRequest:
    """Wrap flat domain fields into the service's flat/nested update body."""

    values = {FieldName(key): value for key, value in fields.items()}

    notifications: NotificationsPayload | None = None
    if FieldName.PUSH_NOTIFICATIONS in values or FieldName.EMAIL_NOTIFICATIONS in values:
        notifications = NotificationsPayload(
            email=_optional_bool(values.get(FieldName.EMAIL_NOTIFICATIONS)),
            push=_optional_bool(values.get(FieldName.PUSH_NOTIFICATIONS)),
        )

    language = values.get(FieldName.LANGUAGE)
    preferences: PreferencesPayload | None = None
    if notifications is not None or language is not None:
        preferences = PreferencesPayload(
            notifications=notifications,
            language=str(language) if language is not None else None,
        )

    full_name = values.get(FieldName.DISPLAY_NAME)
    email = values.get(FieldName.EMAIL)
    return ProfileUpdateRequest(
        full_name=str(full_name) if full_name is not None else None,
        email=str(email) if email is not None else None,
        preferences=preferences,
    )


def parse_remote_user(payload: UserPayload) -> RemoteUser:
    """Map a user payload to a :class:`RemoteUser`, keeping only reported fields."""

    fields: FieldMap = {}
    if payload.full_name is not None:
        fields[FieldName.DISPLAY_NAME] = payload.full_name
    if payload.email is not None:
        fields[FieldName.EMAIL] = payload.email

    preferences = payload.preferences
    if preferences is not None:
        notifications = preferences.notifications
        if notifications is not None and notifications.push is not None:
            fields[FieldName.PUSH_NOTIFICATIONS] = notifications.push
        if notifications is not None and notifications.email is not None:
            fields[FieldName.EMAIL_NOTIFICATIONS] = notifications.email
        if preferences.language is not None:
            language = Language.parse(preferences.language)
            if language is None:
                log.warning(
                    "Ignoring unsupported language %r from account service",
                    preferences.language,
                )
            else:
                fields[FieldName.LANGUAGE] = language

    return RemoteUser(
        id=payload.id,
        role=payload.role,
        created_at=payload.created_at,
        fields=fields,
    )


def _optional_bool(value: object) -> bool | None:
    if value is None:
        return None
    return bool(value)
