"""
Mapping from Cronofy API payloads to unified resources.

Cronofy already normalizes most fields across the calendars it aggregates,
so this is mostly renaming. Missing flags fail safe: events are private and
calendars read-only unless Cronofy says otherwise.
"""

from typing import Optional, Union

from unical.integrations.dates import parse_timestamp
from unical.models import (
    Attendee,
    CalendarResource,
    EventPermissions,
    EventResource,
    Person,
)

PROVIDER_NAME = "cronofy"

PARTICIPATION_STATUSES = {"needs_action", "accepted", "declined", "tentative", "unknown"}


class CronofyAdapter:
    """Maps Cronofy API format to the unified resource format."""

    @staticmethod
    def to_event_resource(
        cronofy_event: dict,
        next_page_token: Optional[str] = None,
    ) -> EventResource:
        location = cronofy_event.get("location") or {}
        organizer = cronofy_event.get("organizer") or {}
        options = cronofy_event.get("options") or {}

        return EventResource(
            id=cronofy_event.get("event_uid") or cronofy_event.get("event_id") or "",
            calendar_id=cronofy_event.get("calendar_id"),
            meeting_url=parse_meeting_url(cronofy_event),
            summary=cronofy_event.get("summary"),
            description=cronofy_event.get("description"),
            start=_parse_event_time(cronofy_event.get("start")),
            end=_parse_event_time(cronofy_event.get("end")),
            deleted=bool(cronofy_event.get("deleted")),
            created=parse_timestamp(cronofy_event.get("created")),
            updated=parse_timestamp(cronofy_event.get("updated")),
            location=location.get("description"),
            participation_status=_parse_status(
                cronofy_event.get("participation_status"), default="needs_action"
            ),
            attendees=[
                Attendee(
                    email=attendee.get("email"),
                    display_name=attendee.get("display_name") or "",
                    status=_parse_status(attendee.get("status")),
                )
                for attendee in cronofy_event.get("attendees") or []
            ],
            organizer=Person(
                email=organizer.get("email"),
                display_name=organizer.get("display_name") or "",
            ),
            transparency=cronofy_event.get("transparency"),
            status=cronofy_event.get("status"),
            recurring=bool(cronofy_event.get("recurring")),
            private=_flag(cronofy_event.get("event_private"), default=True),
            permissions=EventPermissions(
                delete=bool(options.get("delete")),
                update=bool(options.get("update")),
                change_participation_status=bool(
                    options.get("change_participation_status")
                ),
            ),
            next_page_token=next_page_token,
        )

    @staticmethod
    def to_calendar_resource(cronofy_calendar: dict) -> CalendarResource:
        return CalendarResource(
            id=cronofy_calendar.get("calendar_id", ""),
            name=cronofy_calendar.get("calendar_name"),
            provider_name=PROVIDER_NAME,
            profile_id=cronofy_calendar.get("profile_id"),
            profile_name=cronofy_calendar.get("profile_name"),
            readonly=_flag(cronofy_calendar.get("calendar_readonly"), default=True),
            deleted=bool(cronofy_calendar.get("calendar_deleted")),
            primary=bool(cronofy_calendar.get("calendar_primary")),
            next_page_token=None,
        )


def parse_meeting_url(cronofy_event: dict) -> Optional[str]:
    """Prefer meeting_url, falling back to the conferencing join URL."""
    if cronofy_event.get("meeting_url"):
        return cronofy_event["meeting_url"]
    conferencing = cronofy_event.get("conferencing") or {}
    return conferencing.get("join_url") or None


def _parse_event_time(value: Union[str, dict, None]):
    # With localized times Cronofy sends {"time": ..., "tzid": ...}
    if isinstance(value, dict):
        value = value.get("time")
    return parse_timestamp(value)


def _parse_status(value: Optional[str], default: str = "unknown") -> str:
    return value if value in PARTICIPATION_STATUSES else default


def _flag(value: Optional[bool], default: bool) -> bool:
    return default if value is None else bool(value)
