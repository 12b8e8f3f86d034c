"""Terminal results of a save and the notice each one produces.

Every outcome carries a ``status`` discriminator and exactly one
:class:`Notice`, so a caller renders one message per save regardless of how
many remote stages ran.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from profilesync.domain.model import FieldGroup, FieldMap
    from profilesync.domain.ports import GatewayErrorKind


class SaveStatus(StrEnum):
    CONFIRMED = "confirmed"
    LOCAL_FALLBACK = "local_fallback"
    PARTIAL_FAILURE = "partial_failure"
    REJECTED = "rejected"


class NoticeLevel(StrEnum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notice:
    level: NoticeLevel
    message: str


UNAUTHENTICATED = "unauthenticated"


@dataclass(slots=True, kw_only=True)
class Confirmed:
    """The server accepted every stage (or there was nothing to save)."""

    server_fields: FieldMap = field(default_factory=dict["FieldName", "FieldValue"])
    network: bool = True
    status: Literal[SaveStatus.CONFIRMED] = SaveStatus.CONFIRMED

    @property
    def notice(self) -> Notice:
        if not self.network:
            return Notice(NoticeLevel.SUCCESS, "No changes to save")
        return Notice(NoticeLevel.SUCCESS, "Changes saved")


@dataclass(slots=True, kw_only=True)
class LocalFallback:
    """The service was absent or unreachable; the edit was kept locally."""

    reason: GatewayErrorKind
    committed_fields: FieldMap = field(default_factory=dict["FieldName", "FieldValue"])
    status: Literal[SaveStatus.LOCAL_FALLBACK] = SaveStatus.LOCAL_FALLBACK

    @property
    def notice(self) -> Notice:
        return Notice(
            NoticeLevel.WARNING,
            "Changes saved locally (account service not available)",
        )


@dataclass(slots=True, kw_only=True)
class PartialFailure:
    """An earlier stage committed but ``stage`` failed."""

    stage: FieldGroup
    reason: str
    committed_stages: tuple[FieldGroup, ...] = ()
    status: Literal[SaveStatus.PARTIAL_FAILURE] = SaveStatus.PARTIAL_FAILURE

    @property
    def notice(self) -> Notice:
        saved = ", ".join(self.committed_stages) or "nothing"
        return Notice(
            NoticeLevel.WARNING,
            f"Partially saved ({saved}); {self.stage} failed: {self.reason}",
        )


@dataclass(slots=True, kw_only=True)
class Rejected:
    """Nothing was committed; the draft is kept for correction or retry."""

    reason: str
    validation_errors: tuple[str, ...] = ()
    stage: FieldGroup | None = None
    status: Literal[SaveStatus.REJECTED] = SaveStatus.REJECTED

    @property
    def notice(self) -> Notice:
        if self.reason == UNAUTHENTICATED:
            return Notice(NoticeLevel.ERROR, "Not signed in")
        if self.validation_errors:
            return Notice(NoticeLevel.ERROR, "; ".join(self.validation_errors))
        return Notice(NoticeLevel.ERROR, f"Save failed: {self.reason}")


type SaveOutcome = Confirmed | LocalFallback | PartialFailure | Rejected
