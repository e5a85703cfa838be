"""
Google Calendar API client wrapper with error handling.

Provides a thin interface over the Google Calendar API v3. Retries and
transport concerns stay with google-api-python-client.
"""

import logging
from typing import NoReturn, Optional

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build, Resource
from googleapiclient.errors import HttpError

from unical.exceptions import (
    UpstreamAuthError,
    UpstreamConflictError,
    UpstreamError,
    UpstreamNotFoundError,
    UpstreamQuotaError,
    UpstreamRateLimitError,
)

logger = logging.getLogger(__name__)


def _handle_http_error(error: HttpError) -> NoReturn:
    """Convert HttpError to the matching UpstreamError."""
    status = error.resp.status
    message = str(error)

    if status == 401:
        raise UpstreamAuthError(
            "Authentication failed - credentials may be invalid or expired",
            status=status,
            original_error=error,
        )
    elif status == 403:
        if "quota" in message.lower() or "rate limit" in message.lower():
            raise UpstreamQuotaError(
                "API quota exceeded",
                status=status,
                original_error=error,
            )
        raise UpstreamAuthError(
            "Access denied - check calendar sharing permissions",
            status=status,
            original_error=error,
        )
    elif status == 404:
        raise UpstreamNotFoundError(
            "Event, calendar or channel not found",
            status=status,
            original_error=error,
        )
    elif status == 409:
        raise UpstreamConflictError(
            "Resource was modified by another process",
            status=status,
            original_error=error,
        )
    elif status == 429:
        raise UpstreamRateLimitError(
            "Rate limit exceeded - too many requests",
            status=status,
            original_error=error,
        )
    else:
        raise UpstreamError(
            f"Google Calendar API error ({status}): {message}",
            status=status,
            original_error=error,
        )


def _without_none(**kwargs) -> dict:
    return {key: value for key, value in kwargs.items() if value is not None}


class GoogleCalendarClient:
    """
    Wrapper around Google Calendar API v3.

    Synchronous, like the underlying library; one instance per call.
    """

    def __init__(self, credentials: Credentials):
        """
        Initialize the client.

        Args:
            credentials: Google OAuth2 credentials
        """
        self._service: Resource = build(
            "calendar",
            "v3",
            credentials=credentials,
            cache_discovery=False,
        )

    @property
    def service(self) -> Resource:
        """Get the underlying Google API service."""
        return self._service

    def list_events(
        self,
        calendar_id: str,
        time_min: str,
        time_max: str,
        single_events: bool = True,
        max_results: int = 100,
        page_token: Optional[str] = None,
        updated_min: Optional[str] = None,
        time_zone: Optional[str] = None,
    ) -> dict:
        """
        List one page of events from a calendar.

        Args:
            calendar_id: Calendar to query
            time_min: Lower bound (RFC 3339)
            time_max: Upper bound (RFC 3339)
            single_events: If True, expand recurring events
            max_results: Maximum events per page
            page_token: Token for pagination
            updated_min: Only events modified after this time (RFC 3339)
            time_zone: Time zone used in the response

        Returns:
            API response with items and nextPageToken
        """
        try:
            request = self._service.events().list(
                **_without_none(
                    calendarId=calendar_id,
                    timeMin=time_min,
                    timeMax=time_max,
                    singleEvents=single_events,
                    maxResults=max_results,
                    pageToken=page_token,
                    updatedMin=updated_min,
                    timeZone=time_zone,
                    orderBy="startTime" if single_events else None,
                )
            )
            return request.execute()
        except HttpError as e:
            _handle_http_error(e)

    def get_event(self, calendar_id: str, event_id: str) -> dict:
        """
        Get a single event by ID.

        Args:
            calendar_id: Calendar containing the event
            event_id: Event ID

        Returns:
            Event data
        """
        try:
            return self._service.events().get(
                calendarId=calendar_id,
                eventId=event_id,
            ).execute()
        except HttpError as e:
            _handle_http_error(e)

    def list_calendars(
        self,
        max_results: int = 100,
        page_token: Optional[str] = None,
        min_access_role: str = "owner",
    ) -> dict:
        """
        List one page of the user's calendar list.

        Returns:
            API response with items, nextPageToken and nextSyncToken
        """
        try:
            return self._service.calendarList().list(
                **_without_none(
                    maxResults=max_results,
                    pageToken=page_token,
                    minAccessRole=min_access_role,
                )
            ).execute()
        except HttpError as e:
            _handle_http_error(e)

    def get_calendar(self, calendar_id: str) -> dict:
        """
        Get a calendar list entry.

        The calendar list entry carries accessRole and primary, which the
        bare calendar resource does not.
        """
        try:
            return self._service.calendarList().get(calendarId=calendar_id).execute()
        except HttpError as e:
            _handle_http_error(e)

    def watch_events(self, calendar_id: str, body: dict) -> dict:
        """
        Open a push-notification channel for a calendar's events.

        Args:
            calendar_id: Calendar to watch
            body: Channel definition (id, type, address, token)

        Returns:
            Created channel with id and resourceId
        """
        try:
            result = self._service.events().watch(
                calendarId=calendar_id,
                body=body,
            ).execute()
            logger.info(f"Opened channel {result.get('id')} on {calendar_id}")
            return result
        except HttpError as e:
            _handle_http_error(e)

    def stop_channel(self, body: dict) -> None:
        """
        Stop a push-notification channel.

        Args:
            body: Channel identification (id, resourceId, token)
        """
        try:
            self._service.channels().stop(body=body).execute()
            logger.info(f"Stopped channel {body.get('id')}")
        except HttpError as e:
            _handle_http_error(e)
