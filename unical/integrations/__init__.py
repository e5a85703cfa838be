"""
Backend connectors for Unical.

Provides the capability interfaces and the Google and Cronofy connectors.
"""

from unical.integrations.base import (
    CAPABILITY_METHODS,
    BaseConnector,
    CalendarGetter,
    CalendarLister,
    CredentialRefreshable,
    CredentialRevocable,
    EventGetter,
    EventLister,
    NextEventGetter,
    Watchable,
)
from unical.integrations.cronofy import CronofyConnector
from unical.integrations.google_calendar import GoogleConnector

__all__ = [
    "CAPABILITY_METHODS",
    "BaseConnector",
    "CalendarGetter",
    "CalendarLister",
    "CredentialRefreshable",
    "CredentialRevocable",
    "CronofyConnector",
    "EventGetter",
    "EventLister",
    "GoogleConnector",
    "NextEventGetter",
    "Watchable",
]
