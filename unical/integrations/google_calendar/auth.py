"""
Credential handling for the Google Calendar connector.

Refreshes access tokens against Google's OAuth 2.0 token endpoint and
builds the google-auth credentials used by the API client.
"""

from datetime import timedelta
from typing import Optional

import httpx
from google.oauth2.credentials import Credentials

from unical.integrations.credentials import CredentialRefresher, OAuthTokens
from unical.models import Auth

# Google OAuth endpoints
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_REVOKE_URL = "https://oauth2.googleapis.com/revoke"

# Required scopes for calendar operations
CALENDAR_SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/calendar.events",
]


class GoogleCredentialRefresher(CredentialRefresher):
    """
    Refreshes Google OAuth credentials.

    Tokens with more than one day remaining are left alone.
    """

    provider_name = "Google"
    refresh_threshold = timedelta(days=1)

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        token_uri: str = GOOGLE_TOKEN_URL,
        revoke_uri: str = GOOGLE_REVOKE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(client_id, client_secret, transport=transport)
        self.token_uri = token_uri
        self.revoke_uri = revoke_uri

    async def exchange_refresh_token(self, refresh_token: str) -> OAuthTokens:
        """
        Refresh an access token.

        Args:
            refresh_token: The refresh token from initial authorization

        Returns:
            New OAuthTokens; refresh_token is None unless Google rotated it
        """
        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        }

        response = await self._post(self.token_uri, data=data)
        self._raise_for_token_response(response)
        return OAuthTokens.from_response(response.json())

    async def revoke(self, auth: Auth) -> None:
        """Revoke the refresh token (and with it every derived access token)."""
        response = await self._post(
            self.revoke_uri,
            data={"token": auth.refresh_token},
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        self._raise_for_revoke_response(response)

    def build_credentials(self, auth: Auth) -> Credentials:
        """
        Create google-auth credentials from an Auth value.

        Args:
            auth: Valid (already refreshed) credentials

        Returns:
            Google credentials object for the API client
        """
        return Credentials(
            token=auth.access_token,
            refresh_token=auth.refresh_token,
            token_uri=self.token_uri,
            client_id=self.client_id,
            client_secret=self.client_secret,
            scopes=CALENDAR_SCOPES,
        )
