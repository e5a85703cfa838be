"""
Connector capability interfaces and shared connector behavior.

Each backend connector declares the interfaces it satisfies by inheriting
from them; the registry checks those declarations before dispatching.
"""

import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from unical.integrations.credentials import CredentialRefresher
from unical.models import (
    Auth,
    CalendarListResource,
    CalendarResource,
    CredentialUpdate,
    EventListResource,
    EventResource,
    RequestOptions,
    RequestParams,
    WatchChannel,
)

logger = logging.getLogger(__name__)

AuthInput = Union[Auth, Mapping[str, Any]]
ParamsInput = Union[RequestParams, Mapping[str, Any], None]
OptionsInput = Union[RequestOptions, Mapping[str, Any], None]
CredentialListener = Callable[[CredentialUpdate], Optional[Awaitable[None]]]


class CalendarLister(ABC):
    @abstractmethod
    async def list_calendars(
        self, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None
    ) -> Union[CalendarListResource, list[dict]]:
        """List calendars available to the user."""
        ...


class CalendarGetter(ABC):
    @abstractmethod
    async def get_calendar(
        self, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None
    ) -> Union[CalendarResource, dict]:
        """Get the calendar identified by params.calendarId."""
        ...


class EventLister(ABC):
    @abstractmethod
    async def list_events(
        self, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None
    ) -> Union[EventListResource, list[dict]]:
        """List events, optionally scoped to params.calendarId."""
        ...


class EventGetter(ABC):
    @abstractmethod
    async def get_event(
        self, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None
    ) -> Union[EventResource, dict]:
        """Get the event identified by params.eventId."""
        ...


class NextEventGetter(ABC):
    @abstractmethod
    async def get_next_event(
        self, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None
    ) -> Union[EventResource, dict, None]:
        """Get the earliest upcoming event of params.calendarId."""
        ...


class Watchable(ABC):
    @abstractmethod
    async def watch_events(
        self, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None
    ) -> WatchChannel:
        """Register a push-notification channel for event changes."""
        ...

    @abstractmethod
    async def stop_watch_events(
        self, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None
    ) -> WatchChannel:
        """Tear down the channel identified by params.channelId."""
        ...


class CredentialRefreshable(ABC):
    @abstractmethod
    async def refresh_auth_credentials(self, auth: AuthInput) -> Auth:
        """Return valid credentials, refreshing them if they are about to expire."""
        ...


class CredentialRevocable(ABC):
    @abstractmethod
    async def revoke_auth_credentials(self, auth: AuthInput) -> None:
        """Revoke the credentials server-side."""
        ...


# Operation name -> interface that must be declared to support it
CAPABILITY_METHODS: dict[str, type] = {
    "list_calendars": CalendarLister,
    "get_calendar": CalendarGetter,
    "list_events": EventLister,
    "get_event": EventGetter,
    "get_next_event": NextEventGetter,
    "watch_events": Watchable,
    "stop_watch_events": Watchable,
    "refresh_auth_credentials": CredentialRefreshable,
    "revoke_auth_credentials": CredentialRevocable,
}


class BaseConnector:
    """
    Shared behavior of backend connectors.

    Holds only static configuration: the credential refresher and the
    credential-updated listeners. Auth and params always flow through as
    arguments and are never stored on the instance.

    Two concurrent calls sharing the same expiring credentials may both
    refresh them; callers that care should serialize calls per credential.
    """

    name: str = ""

    def __init__(self, refresher: CredentialRefresher):
        self._refresher = refresher
        self._credential_listeners: list[CredentialListener] = []

    def on_credentials_updated(self, listener: CredentialListener) -> CredentialListener:
        """
        Subscribe to credential-updated notifications.

        Listeners receive a CredentialUpdate and may be sync or async.
        Returns the listener so this can be used as a decorator.
        """
        if listener not in self._credential_listeners:
            self._credential_listeners.append(listener)
        return listener

    def remove_credentials_listener(self, listener: CredentialListener) -> None:
        if listener in self._credential_listeners:
            self._credential_listeners.remove(listener)

    async def _notify_credentials_updated(self, auth: Auth) -> None:
        update = auth.to_credential_update()
        for listener in list(self._credential_listeners):
            result = listener(update)
            if inspect.isawaitable(result):
                await result

    async def refresh_auth_credentials(self, auth: AuthInput) -> Auth:
        """
        Refresh the credentials if they are within the refresh threshold.

        Valid credentials are returned unchanged and no notification is
        emitted. Otherwise the refresh completes and listeners are notified
        before this returns, so the following API call uses the new token.

        Raises:
            ValidationError: If the auth object is missing properties
            UpstreamAuthError: If the token endpoint rejects the refresh
        """
        auth = Auth.coerce(auth)
        if not self._refresher.needs_refresh(auth):
            return auth

        refreshed = await self._refresher.refresh(auth)
        if refreshed.access_token != auth.access_token:
            await self._notify_credentials_updated(refreshed)
        return refreshed

    async def revoke_auth_credentials(self, auth: AuthInput) -> None:
        """
        Revoke the refresh token.

        Raises:
            ValidationError: If the auth object is missing properties
            AlreadyRevokedError: If the token was already revoked (recoverable)
        """
        auth = Auth.coerce(auth)
        await self._refresher.revoke(auth)
        logger.info(f"Revoked {self.name} credentials")
