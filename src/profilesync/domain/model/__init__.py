"""Domain model for account editing."""

from __future__ import annotations

from .fields import (
    DEFAULT_SETTINGS,
    GROUP_FIELDS,
    FieldGroup,
    FieldMap,
    FieldName,
    FieldValue,
    Language,
    group_of,
    select,
)
from .identity import SessionIdentity

__all__ = [
    "DEFAULT_SETTINGS",
    "GROUP_FIELDS",
    "FieldGroup",
    "FieldMap",
    "FieldName",
    "FieldValue",
    "Language",
    "SessionIdentity",
    "group_of",
    "select",
]
