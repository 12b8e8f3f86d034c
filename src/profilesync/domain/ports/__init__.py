"""Domain port definitions for adapters."""

from __future__ import annotations

from .gateway import (
    AccountGateway,
    GatewayError,
    GatewayErrorKind,
    NetworkError,
    NotFoundError,
    RemoteUser,
    ServerRejectedError,
    UnauthorizedError,
    UpdateResponse,
)

__all__ = [
    "AccountGateway",
    "GatewayError",
    "GatewayErrorKind",
    "NetworkError",
    "NotFoundError",
    "RemoteUser",
    "ServerRejectedError",
    "UnauthorizedError",
    "UpdateResponse",
]
