"""Editable account fields and their groupings."""

from __future__ import annotations

from enum import StrEnum
from typing import Final

type FieldValue = str | bool
type FieldMap = dict[FieldName, FieldValue]


class FieldName(StrEnum):
    DISPLAY_NAME = "display_name"
    EMAIL = "email"
    PUSH_NOTIFICATIONS = "push_notifications"
    EMAIL_NOTIFICATIONS = "email_notifications"
    LANGUAGE = "language"


class Language(StrEnum):
    EN = "en"
    ES = "es"
    FR = "fr"

    @classmethod
    def parse(cls, value: object) -> Language | None:
        """Return the member for ``value`` or ``None`` when it is not supported."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return None
        return None


class FieldGroup(StrEnum):
    """Field groups saved by one remote update call each."""

    PROFILE = "profile"
    SETTINGS = "settings"

    @property
    def fields(self) -> tuple[FieldName, ...]:
        return GROUP_FIELDS[self]


GROUP_FIELDS: Final[dict[FieldGroup, tuple[FieldName, ...]]] = {
    FieldGroup.PROFILE: (FieldName.DISPLAY_NAME, FieldName.EMAIL),
    FieldGroup.SETTINGS: (
        FieldName.PUSH_NOTIFICATIONS,
        FieldName.EMAIL_NOTIFICATIONS,
        FieldName.LANGUAGE,
    ),
}

DEFAULT_SETTINGS: Final[FieldMap] = {
    FieldName.PUSH_NOTIFICATIONS: True,
    FieldName.EMAIL_NOTIFICATIONS: True,
    FieldName.LANGUAGE: Language.EN,
}


def group_of(name: FieldName) -> FieldGroup:
    for group, names in GROUP_FIELDS.items():
        if name in names:
            return group
    raise KeyError(name)


def select(fields: FieldMap, names: tuple[FieldName, ...]) -> FieldMap:
    """Return the subset of ``fields`` restricted to ``names``."""

    return {name: value for name, value in fields.items() if name in names}
