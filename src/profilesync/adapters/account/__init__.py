"""Public interface for the account service adapter."""

from __future__ import annotations

from .client import HttpAccountGateway, classify_response
from .schema import AccountEnvelope, ProfileUpdateRequest, UserPayload
from .translator import build_update_request, parse_remote_user

__all__ = [
    "AccountEnvelope",
    "HttpAccountGateway",
    "ProfileUpdateRequest",
    "UserPayload",
    "build_update_request",
    "classify_response",
    "parse_remote_user",
]
