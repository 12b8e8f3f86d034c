"""Pydantic models describing the account service payloads."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import cast

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class AccountBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class NotificationsPayload(AccountBaseModel):
    email: bool | None = None
    push: bool | None = None


class PreferencesPayload(AccountBaseModel):
    notifications: NotificationsPayload | None = None
    language: str | None = None


class UserPayload(AccountBaseModel):
    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    full_name: str | None = Field(default=None, alias="fullName")
    email: str | None = None
    role: str | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")
    preferences: PreferencesPayload | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value


class AccountEnvelope(AccountBaseModel):
    """``{success, user?, message?}`` as returned by both endpoints."""

    success: bool = True
    user: UserPayload | None = None
    message: str | None = None


class ErrorPayload(AccountBaseModel):
    success: bool = False
    message: str | None = None
    errors: list[str] = Field(default_factory=list[str])

    @field_validator("errors", mode="before")
    @classmethod
    def _flatten_errors(cls, value: object) -> object:
        # Validators on the service side report either strings or {msg, path} objects.
        if not isinstance(value, list):
            return value
        flattened: list[str] = []
        for item in cast(list[object], value):
            if isinstance(item, Mapping):
                entry = cast(Mapping[str, object], item)
                text = entry.get("msg") or entry.get("message")
                if text is not None:
                    flattened.append(str(text))
            elif item is not None:
                flattened.append(str(item))
        return flattened


class ProfileUpdateRequest(AccountBaseModel):
    """Body of ``PUT /auth/profile``; unset groups are omitted on dump."""

    full_name: str | None = Field(default=None, alias="fullName")
    email: str | None = None
    preferences: PreferencesPayload | None = None

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)
