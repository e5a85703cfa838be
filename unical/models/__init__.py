"""
Unified data model for Unical.

Exports the resources returned to callers, the auth value objects and the
request parameter models.
"""

from unical.models.auth import Auth, CredentialUpdate
from unical.models.requests import RequestOptions, RequestParams
from unical.models.resources import (
    Attendee,
    CalendarListResource,
    CalendarResource,
    EventListResource,
    EventPermissions,
    EventResource,
    Person,
    WatchChannel,
)

__all__ = [
    "Attendee",
    "Auth",
    "CalendarListResource",
    "CalendarResource",
    "CredentialUpdate",
    "EventListResource",
    "EventPermissions",
    "EventResource",
    "Person",
    "RequestOptions",
    "RequestParams",
    "WatchChannel",
]
