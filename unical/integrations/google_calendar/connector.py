"""
Google Calendar connector.

Composes the credential refresher, the API client and the adapter behind
the unified capability set. The Google API client is synchronous, so calls
run in the event loop's default executor.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from functools import partial
from typing import Optional, Union

import httpx

from unical.exceptions import ConfigurationError, ValidationError
from unical.integrations.base import (
    AuthInput,
    BaseConnector,
    CalendarGetter,
    CalendarLister,
    CredentialRefreshable,
    CredentialRevocable,
    EventGetter,
    EventLister,
    NextEventGetter,
    OptionsInput,
    ParamsInput,
    Watchable,
)
from unical.integrations.dates import (
    clamp_max_results,
    format_rfc3339,
    localize,
    parse_timestamp,
    query_window,
    window_end,
)
from unical.integrations.google_calendar.adapter import GoogleCalendarAdapter
from unical.integrations.google_calendar.auth import (
    GOOGLE_REVOKE_URL,
    GOOGLE_TOKEN_URL,
    GoogleCredentialRefresher,
)
from unical.integrations.google_calendar.client import GoogleCalendarClient
from unical.models import (
    Auth,
    CalendarListResource,
    CalendarResource,
    EventListResource,
    EventResource,
    RequestOptions,
    RequestParams,
    WatchChannel,
)

logger = logging.getLogger(__name__)

MAX_RESULTS = 100
# Page size when scanning for the next event; events in progress are skipped
NEXT_EVENT_PAGE_SIZE = 10
DEFAULT_CALENDAR_ID = "primary"

# Joins Google's channel id and resource id into one opaque channel id
CHANNEL_ID_DELIMITER = "///"


def pack_channel_id(channel_id: str, resource_id: str) -> str:
    return f"{channel_id}{CHANNEL_ID_DELIMITER}{resource_id}"


def unpack_channel_id(packed: Optional[str]) -> tuple[str, str]:
    """
    Split a packed channel id into (channel id, resource id).

    Raises:
        ValidationError: If the value does not split into two non-empty parts
    """
    parts = (packed or "").split(CHANNEL_ID_DELIMITER)
    if len(parts) != 2 or not all(parts):
        raise ValidationError(f"Channel ID is in an invalid format: '{packed}'")
    return parts[0], parts[1]


def _event_start(google_event: dict) -> Optional[datetime]:
    start = google_event.get("start") or {}
    return parse_timestamp(start.get("dateTime") or start.get("date"))


class GoogleConnector(
    BaseConnector,
    CalendarLister,
    CalendarGetter,
    EventLister,
    EventGetter,
    NextEventGetter,
    Watchable,
    CredentialRefreshable,
    CredentialRevocable,
):
    """Connector for the Google Calendar API v3."""

    name = "google"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        token_uri: str = GOOGLE_TOKEN_URL,
        revoke_uri: str = GOOGLE_REVOKE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the connector.

        Args:
            client_id: Google OAuth 2.0 client ID
            client_secret: Google OAuth 2.0 client secret
            token_uri: Token endpoint used for refreshes
            revoke_uri: Token revocation endpoint
            transport: Optional httpx transport for the OAuth endpoints

        Raises:
            ConfigurationError: If client id or secret is missing
        """
        if not client_id or not client_secret:
            raise ConfigurationError(
                "Google connector requires client_id and client_secret"
            )
        super().__init__(
            GoogleCredentialRefresher(
                client_id,
                client_secret,
                token_uri=token_uri,
                revoke_uri=revoke_uri,
                transport=transport,
            )
        )
        self._adapter = GoogleCalendarAdapter()

    async def _prepare_api_call(self, auth: AuthInput) -> GoogleCalendarClient:
        """Refresh credentials if needed, then build an API client with them."""
        refreshed = await self.refresh_auth_credentials(auth)
        return GoogleCalendarClient(self._refresher.build_credentials(refreshed))

    async def _run(self, func, **kwargs):
        """Run a synchronous client call in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, **kwargs))

    # Events

    async def list_events(
        self, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None
    ) -> Union[EventListResource, list[dict]]:
        """
        List events of a calendar.

        The requested window is clamped to 42 days back and 201 days ahead,
        and maxResults to 100. A window lying entirely outside that range
        yields an empty result without calling Google.
        """
        params = RequestParams.coerce(params)
        options = RequestOptions.coerce(options)
        window = query_window(params.from_date, params.to_date, params.time_zone)
        if window is None:
            Auth.coerce(auth)
            logger.debug("Requested window is outside the supported range")
            return [] if options.raw else EventListResource()
        client = await self._prepare_api_call(auth)

        calendar_id = params.calendar_id or DEFAULT_CALENDAR_ID
        time_min, time_max = window
        response = await self._run(
            client.list_events,
            calendar_id=calendar_id,
            time_min=format_rfc3339(time_min),
            time_max=format_rfc3339(time_max),
            max_results=clamp_max_results(params.max_results, MAX_RESULTS),
            page_token=params.page_token,
            updated_min=(
                format_rfc3339(localize(params.last_modified, params.time_zone))
                if params.last_modified
                else None
            ),
            time_zone=params.time_zone,
        )

        items = response.get("items") or []
        logger.debug(f"Listed {len(items)} events from {calendar_id}")
        if options.raw:
            return items

        next_page_token = response.get("nextPageToken")
        return EventListResource(
            events=[
                self._adapter.to_event_resource(item, calendar_id, next_page_token)
                for item in items
            ],
            next_page_token=next_page_token,
        )

    async def get_event(
        self, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None
    ) -> Union[EventResource, dict]:
        params = RequestParams.coerce(params)
        options = RequestOptions.coerce(options)
        if not params.event_id:
            raise ValidationError("get_event requires params.eventId")
        client = await self._prepare_api_call(auth)

        calendar_id = params.calendar_id or DEFAULT_CALENDAR_ID
        google_event = await self._run(
            client.get_event,
            calendar_id=calendar_id,
            event_id=params.event_id,
        )
        if options.raw:
            return google_event
        return self._adapter.to_event_resource(google_event, calendar_id)

    async def get_next_event(
        self, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None
    ) -> Union[EventResource, dict, None]:
        """
        Get the first event starting from now, or None if there is none.

        Google matches timeMin against an event's end, so events already in
        progress come back first and are skipped.
        """
        params = RequestParams.coerce(params)
        options = RequestOptions.coerce(options)
        client = await self._prepare_api_call(auth)

        calendar_id = params.calendar_id or DEFAULT_CALENDAR_ID
        now = datetime.now(timezone.utc)
        page_token = None
        while True:
            response = await self._run(
                client.list_events,
                calendar_id=calendar_id,
                time_min=format_rfc3339(now),
                time_max=format_rfc3339(window_end(None, now=now)),
                max_results=NEXT_EVENT_PAGE_SIZE,
                page_token=page_token,
                time_zone=params.time_zone,
            )

            for item in response.get("items") or []:
                start = _event_start(item)
                if start is None or start < now:
                    continue
                if options.raw:
                    return item
                return self._adapter.to_event_resource(item, calendar_id)

            page_token = response.get("nextPageToken")
            if not page_token:
                return None

    async def watch_events(
        self, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None
    ) -> WatchChannel:
        """
        Open a web_hook channel delivering change notifications to params.callbackUrl.

        Returns a single channel id packing Google's channel id and resource id.
        """
        params = RequestParams.coerce(params)
        options = RequestOptions.coerce(options)
        if not options.callback_secret:
            raise ValidationError(
                "The option 'callbackSecret' is mandatory for Google notification channels"
            )
        if not params.callback_url:
            raise ValidationError("watch_events requires params.callbackUrl")
        client = await self._prepare_api_call(auth)

        calendar_id = params.calendar_id or DEFAULT_CALENDAR_ID
        channel = await self._run(
            client.watch_events,
            calendar_id=calendar_id,
            body={
                "id": str(uuid.uuid4()),
                "token": options.callback_secret,
                "type": "web_hook",
                "address": params.callback_url,
            },
        )
        return WatchChannel(channel_id=pack_channel_id(channel["id"], channel["resourceId"]))

    async def stop_watch_events(
        self, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None
    ) -> WatchChannel:
        params = RequestParams.coerce(params)
        options = RequestOptions.coerce(options)
        channel_id, resource_id = unpack_channel_id(params.channel_id)
        client = await self._prepare_api_call(auth)

        body = {"id": channel_id, "resourceId": resource_id}
        if options.callback_secret:
            body["token"] = options.callback_secret
        await self._run(client.stop_channel, body=body)
        return WatchChannel(channel_id=params.channel_id)

    # Calendars

    async def list_calendars(
        self, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None
    ) -> Union[CalendarListResource, list[dict]]:
        """List calendars the user owns, maxResults clamped to 100."""
        params = RequestParams.coerce(params)
        options = RequestOptions.coerce(options)
        client = await self._prepare_api_call(auth)

        response = await self._run(
            client.list_calendars,
            max_results=clamp_max_results(params.max_results, MAX_RESULTS),
            page_token=params.page_token,
        )

        items = response.get("items") or []
        logger.debug(f"Listed {len(items)} calendars")
        if options.raw:
            return items

        next_page_token = response.get("nextPageToken")
        return CalendarListResource(
            calendars=[
                self._adapter.to_calendar_resource(item, next_page_token)
                for item in items
            ],
            next_page_token=next_page_token,
            next_sync_token=response.get("nextSyncToken"),
        )

    async def get_calendar(
        self, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None
    ) -> Union[CalendarResource, dict]:
        params = RequestParams.coerce(params)
        options = RequestOptions.coerce(options)
        client = await self._prepare_api_call(auth)

        google_calendar = await self._run(
            client.get_calendar,
            calendar_id=params.calendar_id or DEFAULT_CALENDAR_ID,
        )
        if options.raw:
            return google_calendar
        return self._adapter.to_calendar_resource(google_calendar)
