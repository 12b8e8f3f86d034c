"""HTTP binding of the account gateway."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from pydantic import ValidationError

from profilesync.adapters.http_resilience import ResilientClient
from profilesync.config.account import AccountServiceConfig, get_account_config
from profilesync.domain.ports import (
    AccountGateway,
    GatewayError,
    NetworkError,
    NotFoundError,
    RemoteUser,
    ServerRejectedError,
    UnauthorizedError,
    UpdateResponse,
)

from .schema import AccountEnvelope, ErrorPayload
from .translator import build_update_request, parse_remote_user

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from profilesync.config.http_resilience import ResilienceConfig
    from profilesync.domain.model import FieldName, FieldValue

log = getLogger(__name__)

NOT_FOUND_STATUSES: Final = frozenset({404, 405, 410, 501})
UNAUTHORIZED_STATUSES: Final = frozenset({401, 403})
TRANSIENT_STATUSES: Final = frozenset({408, 429})


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def bearer_headers(credential: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {credential}"}


def classify_response(response: httpx.Response) -> GatewayError | None:
    """Return the classified failure for a non-success response, if any."""

    status = response.status_code
    if response.is_success:
        return None
    if status in NOT_FOUND_STATUSES:
        return NotFoundError(f"{response.request.url.path} not available", status_code=status)
    if status in UNAUTHORIZED_STATUSES:
        return UnauthorizedError("Credential rejected by account service", status_code=status)
    if status in TRANSIENT_STATUSES or status >= 500:
        return NetworkError(f"Account service error {status}", status_code=status)

    error = _parse_error_payload(response)
    message = error.message or f"Account service rejected the request ({status})"
    return ServerRejectedError(message, details=tuple(error.errors), status_code=status)


def _parse_error_payload(response: httpx.Response) -> ErrorPayload:
    try:
        return ErrorPayload.model_validate(response.json())
    except (ValueError, ValidationError):
        return ErrorPayload(message=response.text.strip() or None)


@dataclass(slots=True)
class HttpAccountGateway:
    """Talks to ``GET /auth/me`` and ``PUT /auth/profile``."""

    config: AccountServiceConfig = field(default_factory=get_account_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    async def fetch_profile(self, credential: str) -> RemoteUser:
        envelope = await self._exchange("GET", self.config.fetch_path, credential)
        if envelope.user is None:
            raise NotFoundError("Account service returned no user")
        return parse_remote_user(envelope.user)

    async def update_profile(
        self,
        fields: Mapping[FieldName, FieldValue],
        credential: str,
    ) -> UpdateResponse:
        body = build_update_request(fields).to_wire()
        log.debug("Updating account fields: %s", sorted(body))
        envelope = await self._exchange("PUT", self.config.update_path, credential, body=body)
        return UpdateResponse(
            success=envelope.success,
            user=parse_remote_user(envelope.user) if envelope.user is not None else None,
            message=envelope.message,
        )

    async def _exchange(
        self,
        method: str,
        path: str,
        credential: str,
        *,
        body: dict[str, object] | None = None,
    ) -> AccountEnvelope:
        url = self.config.url_for(path)
        try:
            async with self.client_factory(self.config.resilience) as client:
                response = await client.request(
                    method,
                    url,
                    json=body,
                    headers=bearer_headers(credential),
                )
        except httpx.TimeoutException as exc:
            raise NetworkError(f"{method} {path} timed out") from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"{method} {path} failed: {exc}") from exc

        failure = classify_response(response)
        if failure is not None:
            log.info("%s %s classified as %s (%s)", method, path, failure.kind, failure)
            raise failure

        return _parse_envelope(response, method=method, path=path)


def _parse_envelope(response: httpx.Response, *, method: str, path: str) -> AccountEnvelope:
    if not response.content:
        return AccountEnvelope(success=True)
    try:
        payload = response.json()
    except ValueError as exc:
        raise NetworkError(f"{method} {path} returned a non-JSON body") from exc

    # Some deployments return the bare user object from /auth/me.
    if isinstance(payload, dict) and "user" not in payload and "success" not in payload:
        payload = {"user": payload}

    try:
        return AccountEnvelope.model_validate(payload)
    except ValidationError as exc:
        raise NetworkError(f"{method} {path} returned an unexpected payload") from exc


if TYPE_CHECKING:
    _gateway_check: AccountGateway = HttpAccountGateway()
