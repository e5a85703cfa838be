"""Tests for Google credential refresh and revocation."""

import json
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs

import httpx
import pytest

from unical.exceptions import AlreadyRevokedError, UpstreamAuthError, UpstreamError
from unical.integrations.google_calendar.auth import (
    CALENDAR_SCOPES,
    GOOGLE_REVOKE_URL,
    GOOGLE_TOKEN_URL,
    GoogleCredentialRefresher,
)
from unical.models import Auth


def make_auth(expires_in: timedelta) -> Auth:
    return Auth(
        access_token="access-1",
        refresh_token="refresh-1",
        expiration_date=datetime.now(timezone.utc) + expires_in,
        id="user-42",
    )


def make_refresher(handler) -> GoogleCredentialRefresher:
    return GoogleCredentialRefresher(
        "client-id", "client-secret", transport=httpx.MockTransport(handler)
    )


class TestNeedsRefresh:
    """Tests for the one-day validity threshold."""

    @pytest.fixture
    def refresher(self):
        return GoogleCredentialRefresher("client-id", "client-secret")

    def test_more_than_a_day_left(self, refresher):
        assert refresher.needs_refresh(make_auth(timedelta(days=2))) is False

    def test_less_than_a_day_left(self, refresher):
        assert refresher.needs_refresh(make_auth(timedelta(hours=23))) is True

    def test_exactly_a_day_left(self, refresher):
        now = datetime(2026, 1, 15, tzinfo=timezone.utc)
        auth = Auth(
            access_token="a",
            refresh_token="r",
            expiration_date=now + timedelta(days=1),
        )
        assert refresher.needs_refresh(auth, now=now) is True

    def test_expired(self, refresher):
        assert refresher.needs_refresh(make_auth(-timedelta(minutes=5))) is True


class TestRefresh:
    """Tests for exchanging the refresh token."""

    @pytest.mark.asyncio
    async def test_refresh_posts_form_to_token_endpoint(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                200,
                json={"access_token": "access-2", "expires_in": 3600, "token_type": "Bearer"},
            )

        refresher = make_refresher(handler)
        auth = make_auth(-timedelta(hours=1))

        refreshed = await refresher.refresh(auth)

        assert len(requests) == 1
        assert str(requests[0].url) == GOOGLE_TOKEN_URL
        form = parse_qs(requests[0].content.decode())
        assert form["grant_type"] == ["refresh_token"]
        assert form["refresh_token"] == ["refresh-1"]
        assert form["client_id"] == ["client-id"]

        assert refreshed.access_token == "access-2"
        assert refreshed.refresh_token == "refresh-1"
        assert refreshed.id == "user-42"
        assert refreshed.time_remaining() > timedelta(minutes=59)
        # The input value is untouched
        assert auth.access_token == "access-1"

    @pytest.mark.asyncio
    async def test_refresh_keeps_rotated_refresh_token(self):
        def handler(request):
            return httpx.Response(
                200,
                json={"access_token": "access-2", "refresh_token": "refresh-2", "expires_in": 60},
            )

        refreshed = await make_refresher(handler).refresh(make_auth(timedelta(0)))
        assert refreshed.refresh_token == "refresh-2"

    @pytest.mark.asyncio
    async def test_rejected_refresh(self):
        def handler(request):
            return httpx.Response(
                400,
                json={"error": "invalid_grant", "error_description": "Token has been expired or revoked."},
            )

        with pytest.raises(UpstreamAuthError) as exc_info:
            await make_refresher(handler).refresh(make_auth(timedelta(0)))
        assert exc_info.value.status == 400
        assert "invalid_grant" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_unreachable_token_endpoint(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamError) as exc_info:
            await make_refresher(handler).refresh(make_auth(timedelta(0)))
        assert isinstance(exc_info.value.original_error, httpx.ConnectError)


class TestRevoke:
    """Tests for token revocation."""

    @pytest.mark.asyncio
    async def test_revoke(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200)

        await make_refresher(handler).revoke(make_auth(timedelta(days=2)))

        assert str(requests[0].url) == GOOGLE_REVOKE_URL
        assert parse_qs(requests[0].content.decode()) == {"token": ["refresh-1"]}

    @pytest.mark.asyncio
    async def test_already_revoked(self):
        def handler(request):
            return httpx.Response(
                400,
                content=json.dumps({"error": "invalid_token", "error_description": "Token expired or revoked"}),
                headers={"Content-Type": "application/json"},
            )

        with pytest.raises(AlreadyRevokedError) as exc_info:
            await make_refresher(handler).revoke(make_auth(timedelta(days=2)))
        assert exc_info.value.recoverable is True
        assert exc_info.value.status == 400

    @pytest.mark.asyncio
    async def test_revoke_server_error(self):
        def handler(request):
            return httpx.Response(503, text="unavailable")

        with pytest.raises(UpstreamError) as exc_info:
            await make_refresher(handler).revoke(make_auth(timedelta(days=2)))
        assert not isinstance(exc_info.value, AlreadyRevokedError)
        assert exc_info.value.status == 503


class TestBuildCredentials:
    """Tests for google-auth credential construction."""

    def test_build_credentials(self):
        refresher = GoogleCredentialRefresher("client-id", "client-secret")
        credentials = refresher.build_credentials(make_auth(timedelta(days=2)))

        assert credentials.token == "access-1"
        assert credentials.refresh_token == "refresh-1"
        assert credentials.client_id == "client-id"
        assert credentials.token_uri == GOOGLE_TOKEN_URL
        assert credentials.scopes == CALENDAR_SCOPES
