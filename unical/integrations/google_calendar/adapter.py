"""
Mapping from Google Calendar API payloads to unified resources.

Handles:
- Timed vs all-day start/end
- Visibility -> private flag and access role -> readonly flag
- Conference data -> meeting URL
- Attendee and organizer normalization
"""

from typing import Optional

from unical.integrations.dates import parse_timestamp
from unical.models import (
    Attendee,
    CalendarResource,
    EventPermissions,
    EventResource,
    Person,
)

PROVIDER_NAME = "google"

CANCELLED_STATUS = "cancelled"

# Visibility values that hide event details; unknown values are treated as private
PRIVATE_VISIBILITY = {
    "private": True,
    "confidential": True,
    "default": False,
    "public": False,
}

# Access roles that cannot write; unknown roles are treated as read-only
READONLY_ACCESS_ROLES = {
    "freeBusyReader": True,
    "reader": True,
    "writer": False,
    "owner": False,
}

RESPONSE_STATUS_FROM_GOOGLE = {
    "needsAction": "needs_action",
    "accepted": "accepted",
    "declined": "declined",
    "tentative": "tentative",
}


class GoogleCalendarAdapter:
    """Maps Google Calendar API format to the unified resource format."""

    @staticmethod
    def to_event_resource(
        google_event: dict,
        calendar_id: Optional[str],
        next_page_token: Optional[str] = None,
    ) -> EventResource:
        """
        Convert a Google Calendar event to a unified event.

        Args:
            google_event: Event from Google Calendar API
            calendar_id: Calendar ID the event was read from
            next_page_token: Continuation token of the page the event is on

        Returns:
            EventResource
        """
        attendees = [
            Attendee(
                email=attendee.get("email"),
                display_name=attendee.get("displayName") or "",
                status=parse_response_status(attendee.get("responseStatus")),
            )
            for attendee in google_event.get("attendees") or []
        ]

        organizer = google_event.get("organizer") or {}
        self_attendee = next(
            (a for a in google_event.get("attendees") or [] if a.get("self")),
            None,
        )
        participation_status = (
            parse_response_status(self_attendee.get("responseStatus"))
            if self_attendee
            else "needs_action"
        )

        # No organizer info means the event lives in the user's own calendar
        is_organizer = bool(organizer.get("self")) or not organizer

        return EventResource(
            id=google_event.get("id", ""),
            calendar_id=calendar_id,
            meeting_url=parse_conference_url(google_event.get("conferenceData")),
            summary=google_event.get("summary"),
            description=google_event.get("description"),
            start=_parse_event_time(google_event.get("start")),
            end=_parse_event_time(google_event.get("end")),
            deleted=google_event.get("status") == CANCELLED_STATUS,
            created=parse_timestamp(google_event.get("created")),
            updated=parse_timestamp(google_event.get("updated")),
            location=google_event.get("location"),
            participation_status=participation_status,
            attendees=attendees,
            organizer=Person(
                email=organizer.get("email"),
                display_name=organizer.get("displayName") or "",
            ),
            transparency=google_event.get("transparency"),
            status=google_event.get("status"),
            recurring=bool(
                google_event.get("recurringEventId") or google_event.get("recurrence")
            ),
            private=parse_visibility_to_private(google_event.get("visibility")),
            permissions=EventPermissions(
                delete=is_organizer,
                update=is_organizer or bool(google_event.get("guestsCanModify")),
                change_participation_status=self_attendee is not None,
            ),
            next_page_token=next_page_token,
        )

    @staticmethod
    def to_calendar_resource(
        google_calendar: dict,
        next_page_token: Optional[str] = None,
    ) -> CalendarResource:
        """
        Convert a Google calendar list entry to a unified calendar.

        Args:
            google_calendar: Calendar list entry from Google Calendar API
            next_page_token: Continuation token of the page the entry is on

        Returns:
            CalendarResource
        """
        return CalendarResource(
            id=google_calendar.get("id", ""),
            name=google_calendar.get("summaryOverride") or google_calendar.get("summary"),
            provider_name=PROVIDER_NAME,
            profile_id=None,
            profile_name=None,
            readonly=parse_access_role_to_readonly(google_calendar.get("accessRole")),
            deleted=bool(google_calendar.get("deleted")),
            primary=bool(google_calendar.get("primary")),
            next_page_token=next_page_token,
        )


def parse_visibility_to_private(visibility: Optional[str]) -> bool:
    """Map event visibility to the private flag, failing safe toward private."""
    return PRIVATE_VISIBILITY.get(visibility, True)


def parse_access_role_to_readonly(access_role: Optional[str]) -> bool:
    """Map calendar access role to the readonly flag, failing safe toward read-only."""
    return READONLY_ACCESS_ROLES.get(access_role, True)


def parse_conference_url(conference_data: Optional[dict]) -> Optional[str]:
    """Return the URI of the first video entry point, or None."""
    if not conference_data:
        return None
    for entry_point in conference_data.get("entryPoints") or []:
        if entry_point.get("entryPointType") == "video":
            return entry_point.get("uri")
    return None


def parse_response_status(response_status: Optional[str]) -> str:
    return RESPONSE_STATUS_FROM_GOOGLE.get(response_status, "unknown")


def _parse_event_time(time_data: Optional[dict]):
    # Timed events carry dateTime; all-day events only date
    if not time_data:
        return None
    return parse_timestamp(time_data.get("dateTime") or time_data.get("date"))
