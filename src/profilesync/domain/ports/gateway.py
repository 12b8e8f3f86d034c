"""Port for the remote account service.

Adapters classify every failure into one of the :class:`GatewayErrorKind`
values before it reaches the domain. Callers branch on ``error.kind`` only and
never on transport details.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

    from profilesync.domain.model import FieldMap, FieldName, FieldValue


class GatewayErrorKind(StrEnum):
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    NETWORK = "network"
    SERVER_REJECTED = "server_rejected"

    @property
    def is_soft(self) -> bool:
        """Soft failures are accepted locally instead of failing the save."""

        return self in {GatewayErrorKind.NOT_FOUND, GatewayErrorKind.NETWORK}


class GatewayError(RuntimeError):
    """Classified failure raised by an account gateway."""

    kind: GatewayErrorKind

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(GatewayError):
    kind = GatewayErrorKind.NOT_FOUND


class UnauthorizedError(GatewayError):
    kind = GatewayErrorKind.UNAUTHORIZED


class NetworkError(GatewayError):
    kind = GatewayErrorKind.NETWORK


class ServerRejectedError(GatewayError):
    kind = GatewayErrorKind.SERVER_REJECTED

    def __init__(
        self,
        message: str,
        *,
        details: tuple[str, ...] = (),
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.details = details or (message,)


@dataclass(slots=True, kw_only=True)
class RemoteUser:
    """Account as reported by the service; absent values stay ``None``."""

    id: str | None = None
    role: str | None = None
    created_at: datetime | None = None
    fields: FieldMap = field(default_factory=dict["FieldName", "FieldValue"])


@dataclass(slots=True, kw_only=True)
class UpdateResponse:
    success: bool
    user: RemoteUser | None = None
    message: str | None = None


@runtime_checkable
class AccountGateway(Protocol):
    """Fetch and update the signed-in account."""

    async def fetch_profile(self, credential: str) -> RemoteUser: ...

    async def update_profile(
        self,
        fields: Mapping[FieldName, FieldValue],
        credential: str,
    ) -> UpdateResponse: ...
