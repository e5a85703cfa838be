"""
Credential refresh policy shared by all connectors.

A refresher decides whether an access token is still valid, exchanges the
refresh token at the backend token endpoint when it is not, and revokes
tokens. It never persists anything: the new Auth is returned and the
connector notifies listeners.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx

from unical.exceptions import AlreadyRevokedError, UpstreamAuthError, UpstreamError
from unical.models.auth import Auth

logger = logging.getLogger(__name__)

# OAuth error codes providers use for tokens that are already gone
REVOKED_TOKEN_ERRORS = ("invalid_token", "invalid_grant")


@dataclass
class OAuthTokens:
    """OAuth token response from a token endpoint."""

    access_token: str
    refresh_token: Optional[str]
    expires_in: int
    token_type: str = "Bearer"
    scope: str = ""

    def expiry(self, now: Optional[datetime] = None) -> datetime:
        """Calculate token expiry time."""
        now = now or datetime.now(timezone.utc)
        return now + timedelta(seconds=self.expires_in)

    @classmethod
    def from_response(cls, token_data: dict) -> "OAuthTokens":
        return cls(
            access_token=token_data["access_token"],
            refresh_token=token_data.get("refresh_token"),
            expires_in=int(token_data.get("expires_in", 3600)),
            token_type=token_data.get("token_type", "Bearer"),
            scope=token_data.get("scope", ""),
        )


def _error_details(response: httpx.Response) -> tuple[str, str]:
    """Extract (error code, description) from an OAuth error response."""
    try:
        body = response.json()
    except ValueError:
        return "", response.text[:200]
    if not isinstance(body, dict):
        return "", str(body)[:200]
    error = body.get("error", "")
    if isinstance(error, dict):
        return str(error.get("status", "")), str(error.get("message", ""))
    return str(error), str(body.get("error_description", ""))


class CredentialRefresher(ABC):
    """
    Base class for per-backend credential refreshers.

    Subclasses set ``refresh_threshold``: an access token with more time
    remaining than the threshold is considered valid.
    """

    provider_name: str = ""
    refresh_threshold: timedelta = timedelta(0)

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self._transport = transport

    def needs_refresh(self, auth: Auth, now: Optional[datetime] = None) -> bool:
        """Check whether the access token is within the refresh threshold."""
        return auth.time_remaining(now) <= self.refresh_threshold

    async def refresh(self, auth: Auth) -> Auth:
        """
        Exchange the refresh token and return a new Auth value.

        The refresh token is kept when the provider does not rotate it.

        Raises:
            UpstreamAuthError: If the token endpoint rejects the refresh
            UpstreamError: If the token endpoint cannot be reached
        """
        tokens = await self.exchange_refresh_token(auth.refresh_token)
        logger.info(f"Refreshed {self.provider_name} access token")
        return auth.model_copy(
            update={
                "access_token": tokens.access_token,
                "refresh_token": tokens.refresh_token or auth.refresh_token,
                "expiration_date": tokens.expiry(),
            }
        )

    @abstractmethod
    async def exchange_refresh_token(self, refresh_token: str) -> OAuthTokens:
        """Call the backend token endpoint with a refresh token."""
        ...

    @abstractmethod
    async def revoke(self, auth: Auth) -> None:
        """Invalidate the refresh token server-side."""
        ...

    async def _post(self, url: str, **kwargs) -> httpx.Response:
        """POST to an OAuth endpoint, converting transport failures."""
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                return await client.post(url, **kwargs)
        except httpx.RequestError as e:
            raise UpstreamError(
                f"{self.provider_name} token endpoint unreachable: {e}",
                original_error=e,
            )

    def _raise_for_token_response(self, response: httpx.Response) -> None:
        """Convert a failed token exchange into UpstreamAuthError."""
        if response.is_success:
            return
        error, description = _error_details(response)
        raise UpstreamAuthError(
            f"{self.provider_name} token refresh failed ({response.status_code}): "
            f"{error} {description}".strip(),
            status=response.status_code,
        )

    def _raise_for_revoke_response(self, response: httpx.Response) -> None:
        """Convert a failed revocation, flagging already-revoked tokens."""
        if response.is_success:
            return
        error, description = _error_details(response)
        if response.status_code in (400, 401) and error in REVOKED_TOKEN_ERRORS:
            raise AlreadyRevokedError(
                f"{self.provider_name} token already revoked: {description or error}",
                status=response.status_code,
            )
        raise UpstreamError(
            f"{self.provider_name} token revocation failed ({response.status_code}): "
            f"{error} {description}".strip(),
            status=response.status_code,
        )
