"""
Unified resource shapes returned by every connector.

Connectors map provider payloads onto these models so callers never see
which backend produced a record (unless they ask for raw mode).
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

ParticipationStatus = Literal["needs_action", "accepted", "declined", "tentative", "unknown"]


class Person(BaseModel):
    """Organizer of an event."""

    email: Optional[str] = None
    display_name: str = ""


class Attendee(BaseModel):
    """Event attendee with response status."""

    email: Optional[str] = None
    display_name: str = ""
    status: ParticipationStatus = "unknown"


class EventPermissions(BaseModel):
    """What the authenticated user may do with an event."""

    delete: bool = False
    update: bool = False
    change_participation_status: bool = False


class EventResource(BaseModel):
    """Backend-agnostic event."""

    id: str
    calendar_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    deleted: bool = False
    recurring: bool = False
    private: bool = True
    created: Optional[datetime] = None
    updated: Optional[datetime] = None
    meeting_url: Optional[str] = None
    participation_status: ParticipationStatus = "needs_action"
    organizer: Person = Field(default_factory=Person)
    attendees: list[Attendee] = Field(default_factory=list)
    transparency: Optional[str] = None
    status: Optional[str] = None
    categories: list[str] = Field(default_factory=list)
    permissions: EventPermissions = Field(default_factory=EventPermissions)
    next_page_token: Optional[str] = None


class CalendarResource(BaseModel):
    """Backend-agnostic calendar."""

    id: str
    name: Optional[str] = None
    provider_name: str
    profile_id: Optional[str] = None
    profile_name: Optional[str] = None
    readonly: bool = True
    primary: bool = False
    deleted: bool = False
    next_page_token: Optional[str] = None


class EventListResource(BaseModel):
    """A page of events."""

    events: list[EventResource] = Field(default_factory=list)
    next_page_token: Optional[str] = None


class CalendarListResource(BaseModel):
    """A page of calendars, with a sync token where the backend supports it."""

    calendars: list[CalendarResource] = Field(default_factory=list)
    next_page_token: Optional[str] = None
    next_sync_token: Optional[str] = None


class WatchChannel(BaseModel):
    """Opaque handle of a push-notification channel."""

    channel_id: str
