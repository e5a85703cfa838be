"""
Unical application object.

Owns the connector registry and exposes the uniform call surface grouped
the way callers think about it: calendars, events and auth.

Usage:
    app = create_app()

    app.on_credentials_updated(save_tokens)
    events = await app.events.list("google", auth, {"calendarId": "primary"})
"""

import logging
from typing import Any, Optional

from unical.config import Settings, get_settings
from unical.integrations.base import (
    AuthInput,
    BaseConnector,
    CredentialListener,
    OptionsInput,
    ParamsInput,
)
from unical.integrations.cronofy import CronofyConnector
from unical.integrations.google_calendar import GoogleConnector
from unical.registry import ConnectorRegistry

logger = logging.getLogger(__name__)


class _Operations:
    def __init__(self, registry: ConnectorRegistry):
        self._registry = registry


class CalendarOperations(_Operations):
    def list(self, connector_name: str, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None):
        """Get a list of calendars."""
        return self._registry.dispatch(connector_name, "list_calendars", auth, params, options)

    def get(self, connector_name: str, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None):
        """Get the calendar with params.calendarId."""
        return self._registry.dispatch(connector_name, "get_calendar", auth, params, options)


class EventOperations(_Operations):
    def list(self, connector_name: str, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None):
        """Get a list of events."""
        return self._registry.dispatch(connector_name, "list_events", auth, params, options)

    def get(self, connector_name: str, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None):
        """Get the event with params.eventId."""
        return self._registry.dispatch(connector_name, "get_event", auth, params, options)

    def next(self, connector_name: str, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None):
        """Get the next upcoming event of params.calendarId."""
        return self._registry.dispatch(connector_name, "get_next_event", auth, params, options)

    def watch(self, connector_name: str, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None):
        """Subscribe params.callbackUrl to event changes."""
        return self._registry.dispatch(connector_name, "watch_events", auth, params, options)

    def stop_watch(self, connector_name: str, auth: AuthInput, params: ParamsInput = None, options: OptionsInput = None):
        """Stop the channel params.channelId."""
        return self._registry.dispatch(connector_name, "stop_watch_events", auth, params, options)


class AuthOperations(_Operations):
    def refresh(self, connector_name: str, auth: AuthInput):
        """Refresh the credentials if they are about to expire."""
        return self._registry.dispatch(connector_name, "refresh_auth_credentials", auth)

    def revoke(self, connector_name: str, auth: AuthInput):
        """Revoke the credentials."""
        return self._registry.dispatch(connector_name, "revoke_auth_credentials", auth)


class Unical:
    """
    Provider-agnostic entry point for calendar and event data.

    Each instance has its own registry; nothing is shared between instances.
    """

    def __init__(self, registry: Optional[ConnectorRegistry] = None):
        self.registry = registry or ConnectorRegistry()
        self._credential_listeners: list[CredentialListener] = []

        self.calendars = CalendarOperations(self.registry)
        self.events = EventOperations(self.registry)
        self.auth = AuthOperations(self.registry)

    def use(self, connector: Any) -> None:
        """Register a connector, subscribing existing credential listeners to it."""
        self.registry.register(connector)
        if isinstance(connector, BaseConnector):
            for listener in self._credential_listeners:
                connector.on_credentials_updated(listener)

    def list_connectors(self) -> list[str]:
        return self.registry.list_connectors()

    def dispatch(self, connector_name: str, method_name: str, *args, **kwargs) -> Any:
        return self.registry.dispatch(connector_name, method_name, *args, **kwargs)

    def on_credentials_updated(self, listener: CredentialListener) -> CredentialListener:
        """
        Subscribe to credential updates from every current and future connector.

        Persisting rotated tokens is the caller's job; this is where to do it.
        """
        self._credential_listeners.append(listener)
        for name in self.registry.list_connectors():
            connector = self.registry.get(name)
            if isinstance(connector, BaseConnector):
                connector.on_credentials_updated(listener)
        return listener


def create_app(settings: Optional[Settings] = None) -> Unical:
    """
    Build a Unical instance with every connector configured in settings.

    Raises:
        ConfigurationError: If no connector has complete client credentials
    """
    settings = settings or get_settings()
    settings.validate_connector_config()
    logging.getLogger("unical").setLevel(settings.log_level)

    app = Unical()
    if settings.uses_google:
        app.use(
            GoogleConnector(
                settings.google_client_id,
                settings.google_client_secret,
                token_uri=settings.google_token_uri,
                revoke_uri=settings.google_revoke_uri,
            )
        )
    if settings.uses_cronofy:
        app.use(
            CronofyConnector(
                settings.cronofy_client_id,
                settings.cronofy_client_secret,
                data_center=settings.cronofy_data_center or None,
                default_time_zone=settings.default_time_zone,
            )
        )

    logger.info(f"Unical started with connectors: {', '.join(app.list_connectors())}")
    return app
