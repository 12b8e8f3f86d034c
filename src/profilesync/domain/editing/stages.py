"""Save stages: one remote update call per participating field group."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from profilesync.domain.model import FieldGroup, select

if TYPE_CHECKING:
    from collections.abc import Iterable

    from profilesync.domain.model import FieldMap, FieldName
    from profilesync.domain.ports import UpdateResponse


@dataclass(frozen=True, slots=True)
class SaveStage:
    """Submits the changed fields of one group and reads back the result."""

    group: FieldGroup

    @property
    def name(self) -> str:
        return self.group.value

    @property
    def fields(self) -> tuple[FieldName, ...]:
        return self.group.fields

    def payload(self, changes: FieldMap) -> FieldMap:
        return select(changes, self.fields)

    def confirmed_fields(self, response: UpdateResponse, submitted: FieldMap) -> FieldMap:
        """Values to treat as confirmed after a successful update.

        Server-reported values of this group win; anything the server did not
        echo back falls back to what was submitted. Values of other groups in
        the response are ignored so a later stage's draft is not overwritten.
        """

        if response.user is None:
            return dict(submitted)
        return {**submitted, **select(response.user.fields, self.fields)}


PROFILE_STAGE: Final = SaveStage(FieldGroup.PROFILE)
SETTINGS_STAGE: Final = SaveStage(FieldGroup.SETTINGS)

_STAGE_ORDER: Final = (PROFILE_STAGE, SETTINGS_STAGE)


def stages_for(groups: Iterable[FieldGroup]) -> tuple[SaveStage, ...]:
    """Build the stage list for an editor, profile always before settings."""

    wanted = set(groups)
    stages = tuple(stage for stage in _STAGE_ORDER if stage.group in wanted)
    if not stages:
        raise ValueError("An editor needs at least one field group")
    return stages
