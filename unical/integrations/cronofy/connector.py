"""
Cronofy connector.

Cronofy aggregates Google, Exchange, iCloud and Outlook.com calendars
behind one API. It has no single-calendar, single-event or next-event
lookup, so this connector does not declare those capabilities.
"""

import logging
from datetime import date, timedelta
from typing import Optional, Union

import httpx

from unical.exceptions import ConfigurationError, ValidationError
from unical.integrations.base import (
    AuthInput,
    BaseConnector,
    CalendarLister,
    CredentialRefreshable,
    CredentialRevocable,
    EventLister,
    OptionsInput,
    ParamsInput,
    Watchable,
)
from unical.integrations.cronofy.adapter import CronofyAdapter
from unical.integrations.cronofy.auth import CronofyCredentialRefresher
from unical.integrations.cronofy.client import (
    CronofyClient,
    api_base_url,
    validate_page_url,
)
from unical.integrations.dates import (
    format_rfc3339,
    localize,
    query_window,
    window_bounds,
)
from unical.models import (
    Auth,
    CalendarListResource,
    EventListResource,
    RequestOptions,
    RequestParams,
    WatchChannel,
)

logger = logging.getLogger(__name__)

DEFAULT_TIME_ZONE = "Etc/UTC"


class CronofyConnector(
    BaseConnector,
    CalendarLister,
    EventLister,
    Watchable,
    CredentialRefreshable,
    CredentialRevocable,
):
    """Connector for the Cronofy calendar aggregation API."""

    name = "cronofy"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        data_center: Optional[str] = None,
        default_time_zone: str = DEFAULT_TIME_ZONE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the connector.

        Args:
            client_id: Cronofy OAuth client ID
            client_secret: Cronofy OAuth client secret
            data_center: Cronofy data center ('de', 'uk'...), US when omitted
            default_time_zone: tzid used when a request has no timeZone
            transport: Optional httpx transport for all Cronofy requests

        Raises:
            ConfigurationError: If client id or secret is missing
        """
        if not client_id or not client_secret:
            raise ConfigurationError(
                "Cronofy connector requires client_id and client_secret"
            )
        self.base_url = api_base_url(data_center)
        super().__init__(
            CronofyCredentialRefresher(
                client_id,
                client_secret,
                base_url=self.base_url,
                transport=transport,
            )
        )
        self.default_time_zone = default_time_zone
        self._transport = transport
        self._adapter = CronofyAdapter()

    async def _prepare_api_call(self, auth: AuthInput) -> CronofyClient:
        """Refresh credentials if needed, then open a client with them."""
        refreshed: Auth = await self.refresh_auth_credentials(auth)
        return CronofyClient(
            refreshed.access_token,
            base_url=self.base_url,
            transport=self._transport,
        )

    # Events

    async def list_events(
        self, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None
    ) -> Union[EventListResource, list[dict]]:
        """
        Read events across the account's calendars, or one calendar.

        params.pageToken is the next-page URL returned by a previous call.
        A window lying entirely outside the supported range yields an empty
        result without calling Cronofy.
        """
        params = RequestParams.coerce(params)
        options = RequestOptions.coerce(options)
        time_zone = params.time_zone or self.default_time_zone

        query = None
        if params.page_token:
            validate_page_url(params.page_token, self.base_url)
        else:
            query = self._build_event_query(params, time_zone)
            if query is None:
                Auth.coerce(auth)
                logger.debug("Requested window is outside the supported range")
                return [] if options.raw else EventListResource()

        async with await self._prepare_api_call(auth) as client:
            if params.page_token:
                response = await client.read_events_page(params.page_token)
            else:
                response = await client.read_events(query)

        events = response.get("events") or []
        logger.debug(f"Read {len(events)} events from Cronofy")
        if options.raw:
            return events

        next_page_token = (response.get("pages") or {}).get("next_page")
        return EventListResource(
            events=[
                self._adapter.to_event_resource(event, next_page_token)
                for event in events
            ],
            next_page_token=next_page_token,
        )

    def _build_event_query(self, params: RequestParams, time_zone: str) -> Optional[dict]:
        """
        Build the read-events query, or None when the window is empty.

        Cronofy takes dates in ``tzid``, with an exclusive 'to', and rejects
        windows beyond 201 days ahead; both bounds are clamped to that range.
        """
        window = query_window(params.from_date, params.to_date, time_zone)
        if window is None:
            return None
        start, end = window
        latest_day: date = window_bounds(time_zone)[1].date()
        from_day: date = start.date()
        to_day: date = min(end.date() + timedelta(days=1), latest_day)
        if from_day >= to_day:
            return None

        query: dict = {
            "tzid": time_zone,
            "from": from_day.isoformat(),
            "to": to_day.isoformat(),
        }
        if params.last_modified:
            query["last_modified"] = format_rfc3339(
                localize(params.last_modified, time_zone)
            )
        if params.calendar_id:
            query["calendar_ids[]"] = [params.calendar_id]
        return query

    async def watch_events(
        self, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None
    ) -> WatchChannel:
        params = RequestParams.coerce(params)
        if not params.callback_url:
            raise ValidationError("watch_events requires params.callbackUrl")

        async with await self._prepare_api_call(auth) as client:
            response = await client.create_channel(
                params.callback_url,
                calendar_ids=[params.calendar_id] if params.calendar_id else None,
            )
        return WatchChannel(channel_id=response["channel"]["channel_id"])

    async def stop_watch_events(
        self, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None
    ) -> WatchChannel:
        params = RequestParams.coerce(params)
        if not params.channel_id:
            raise ValidationError("stop_watch_events requires params.channelId")

        async with await self._prepare_api_call(auth) as client:
            await client.close_channel(params.channel_id)
        return WatchChannel(channel_id=params.channel_id)

    # Calendars

    async def list_calendars(
        self, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None
    ) -> Union[CalendarListResource, list[dict]]:
        """List calendars of every connected profile; Cronofy does not paginate these."""
        RequestParams.coerce(params)
        options = RequestOptions.coerce(options)

        async with await self._prepare_api_call(auth) as client:
            response = await client.list_calendars()

        calendars = response.get("calendars") or []
        if options.raw:
            return calendars

        return CalendarListResource(
            calendars=[self._adapter.to_calendar_resource(c) for c in calendars],
            next_page_token=None,
            next_sync_token=None,
        )
