"""Draft/original tracking for one open editor."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from profilesync.domain.model import FieldGroup, FieldMap, FieldName, FieldValue

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from profilesync.domain.model import SessionIdentity


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _field_name(key: object) -> FieldName | None:
    try:
        return FieldName(key)
    except ValueError:
        return None


@dataclass(slots=True)
class DraftStateStore:
    """Keeps the last confirmed copy of account fields next to the edited copy.

    ``original`` only changes through :meth:`merge_remote` and
    :meth:`commit_local`; ``draft`` is free for the caller to mutate through
    :meth:`set_field`. Both mappings always carry the key set chosen in
    :meth:`load_from`.
    """

    original: FieldMap = field(default_factory=dict["FieldName", "FieldValue"])
    draft: FieldMap = field(default_factory=dict["FieldName", "FieldValue"])
    last_synced_at: datetime | None = None
    clock: Callable[[], datetime] = field(default=_utcnow, repr=False)

    @property
    def keys(self) -> frozenset[FieldName]:
        return frozenset(self.original)

    def load_from(
        self,
        identity: SessionIdentity,
        groups: Iterable[FieldGroup] = (FieldGroup.PROFILE, FieldGroup.SETTINGS),
    ) -> None:
        values = identity.editable_fields()
        names = [name for group in groups for name in group.fields]
        self.original = {name: values[name] for name in names}
        self.draft = dict(self.original)
        self.last_synced_at = self.clock()

    def merge_remote(self, fields: Mapping[FieldName, FieldValue]) -> FieldMap:
        """Overlay server-confirmed ``fields`` onto both copies.

        Keys the store does not track are ignored and nothing is removed.
        Returns the values that were applied.
        """

        applied = self._overlay(fields)
        self.last_synced_at = self.clock()
        return applied

    def commit_local(self, fields: Mapping[FieldName, FieldValue]) -> FieldMap:
        """Accept ``fields`` as committed without server confirmation."""

        return self._overlay(fields)

    def set_field(self, key: FieldName | str, value: FieldValue) -> None:
        name = _field_name(key)
        if name is None or name not in self.draft:
            raise KeyError(f"Field {key} is not edited here")
        self.draft[name] = value

    def changed_fields(self) -> FieldMap:
        return {
            name: value for name, value in self.draft.items() if value != self.original[name]
        }

    def is_dirty(self) -> bool:
        return bool(self.changed_fields())

    def revert(self) -> None:
        self.draft = dict(self.original)

    def _overlay(self, fields: Mapping[FieldName, FieldValue]) -> FieldMap:
        applied: FieldMap = {}
        for key, value in fields.items():
            name = _field_name(key)
            if name is None or name not in self.original:
                continue
            self.original[name] = value
            self.draft[name] = value
            applied[name] = value
        return applied
