"""
Cronofy API client over httpx.

Covers the calendar, event and push-channel endpoints the connector needs.
"""

import logging
from typing import NoReturn, Optional

import httpx

from unical.exceptions import (
    UpstreamAuthError,
    UpstreamConflictError,
    UpstreamError,
    UpstreamNotFoundError,
    UpstreamRateLimitError,
    ValidationError,
)

logger = logging.getLogger(__name__)

CRONOFY_API_URL = "https://api.cronofy.com"


def api_base_url(data_center: Optional[str] = None) -> str:
    """Base URL of the Cronofy API for a data center ('' or None for the US default)."""
    if not data_center or data_center.lower() == "us":
        return CRONOFY_API_URL
    return f"https://api-{data_center.lower()}.cronofy.com"


def validate_page_url(next_page: str, base_url: str) -> None:
    """
    Check that a next-page URL points at the Cronofy API in use.

    The client sends the bearer token with every request, so a page URL on
    any other origin is refused.

    Raises:
        ValidationError: If the URL is malformed or on another origin
    """
    try:
        url = httpx.URL(next_page)
    except (httpx.InvalidURL, TypeError) as e:
        raise ValidationError(f"Invalid page token: {next_page!r}", original_error=e)
    if not url.is_absolute_url:
        return
    base = httpx.URL(base_url)
    if (url.scheme, url.host, url.port) != (base.scheme, base.host, base.port):
        raise ValidationError(f"Page token does not belong to {base.host}")


def _handle_response_error(response: httpx.Response) -> NoReturn:
    """Convert a non-2xx Cronofy response to the matching UpstreamError."""
    status = response.status_code
    message = response.text[:200]

    if status in (401, 403):
        raise UpstreamAuthError(
            "Authentication failed - credentials may be invalid or expired",
            status=status,
        )
    elif status == 404:
        raise UpstreamNotFoundError(
            "Calendar, event or channel not found",
            status=status,
        )
    elif status == 409:
        raise UpstreamConflictError(
            "Resource was modified by another process",
            status=status,
        )
    elif status == 429:
        raise UpstreamRateLimitError(
            "Rate limit exceeded - too many requests",
            status=status,
        )
    else:
        raise UpstreamError(
            f"Cronofy API error ({status}): {message}",
            status=status,
        )


class CronofyClient:
    """
    Async wrapper around the Cronofy API.

    Use as an async context manager; one instance per call.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = CRONOFY_API_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {access_token}"},
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False

    async def close(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> dict:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise UpstreamError(f"Cronofy API unreachable: {e}", original_error=e)

        if not response.is_success:
            _handle_response_error(response)
        if not response.content:
            return {}
        return response.json()

    async def list_calendars(self) -> dict:
        """
        List calendars of every profile connected to the account.

        Returns:
            API response with a calendars list
        """
        return await self._request("GET", "/v1/calendars")

    async def read_events(self, query: dict) -> dict:
        """
        Read the first page of events.

        Args:
            query: Query parameters (tzid, from, to, last_modified, calendar_ids[])

        Returns:
            API response with events and pages
        """
        return await self._request("GET", "/v1/events", params=query)

    async def read_events_page(self, next_page: str) -> dict:
        """
        Read a further page of events.

        Args:
            next_page: The pages.next_page URL from a previous response

        Raises:
            ValidationError: If the URL is not on this client's API origin
        """
        validate_page_url(next_page, str(self._http.base_url))
        return await self._request("GET", next_page)

    async def create_channel(
        self,
        callback_url: str,
        calendar_ids: Optional[list[str]] = None,
    ) -> dict:
        """
        Open a push-notification channel.

        Args:
            callback_url: Where Cronofy should deliver change notifications
            calendar_ids: Restrict notifications to these calendars

        Returns:
            API response with the created channel
        """
        body: dict = {"callback_url": callback_url}
        if calendar_ids:
            body["filters"] = {"calendar_ids": calendar_ids}

        result = await self._request("POST", "/v1/channels", json=body)
        logger.info(f"Opened channel {result.get('channel', {}).get('channel_id')}")
        return result

    async def close_channel(self, channel_id: str) -> None:
        await self._request("DELETE", f"/v1/channels/{channel_id}")
        logger.info(f"Closed channel {channel_id}")
