"""Credential handling for the Cronofy connector."""

from datetime import timedelta
from typing import Optional

import httpx

from unical.integrations.credentials import CredentialRefresher, OAuthTokens
from unical.integrations.cronofy.client import CRONOFY_API_URL
from unical.models import Auth


class CronofyCredentialRefresher(CredentialRefresher):
    """
    Refreshes Cronofy OAuth credentials.

    A token is valid as long as its expiration date lies in the future.
    Cronofy rotates the refresh token on every exchange.
    """

    provider_name = "Cronofy"
    refresh_threshold = timedelta(0)

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str = CRONOFY_API_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(client_id, client_secret, transport=transport)
        self.base_url = base_url

    async def exchange_refresh_token(self, refresh_token: str) -> OAuthTokens:
        response = await self._post(
            f"{self.base_url}/oauth/token",
            json={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
            },
        )
        self._raise_for_token_response(response)
        return OAuthTokens.from_response(response.json())

    async def revoke(self, auth: Auth) -> None:
        response = await self._post(
            f"{self.base_url}/oauth/token/revoke",
            json={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "token": auth.refresh_token,
            },
        )
        self._raise_for_revoke_response(response)
