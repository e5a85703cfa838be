"""
Pytest configuration and fixtures for Unical tests.

Provides auth objects in different lifecycle states and sample upstream
payloads.
"""

from datetime import datetime, timedelta, timezone

import pytest


@pytest.fixture
def valid_auth() -> dict:
    """
    Credentials that expire well beyond every refresh threshold.

    Returns:
        dict: Auth mapping as a caller would pass it
    """
    return {
        "access_token": "access-1",
        "refresh_token": "refresh-1",
        "expiration_date": (datetime.now(timezone.utc) + timedelta(days=30)).isoformat(),
        "id": "user-42",
    }


@pytest.fixture
def expired_auth() -> dict:
    """
    Credentials whose access token expired an hour ago.

    Returns:
        dict: Auth mapping as a caller would pass it
    """
    return {
        "access_token": "access-1",
        "refresh_token": "refresh-1",
        "expiration_date": (datetime.now(timezone.utc) - timedelta(hours=1)).isoformat(),
        "id": "user-42",
    }


@pytest.fixture
def google_event() -> dict:
    """A timed Google Calendar event with attendees and a video link."""
    return {
        "id": "evt-1",
        "status": "confirmed",
        "summary": "Planning",
        "description": "Quarterly planning",
        "location": "Room 4",
        "created": "2026-01-10T09:00:00Z",
        "updated": "2026-01-11T09:00:00Z",
        "start": {"dateTime": "2026-01-15T10:00:00+01:00"},
        "end": {"dateTime": "2026-01-15T11:00:00+01:00"},
        "visibility": "public",
        "transparency": "opaque",
        "organizer": {"email": "boss@example.com", "displayName": "Boss"},
        "attendees": [
            {"email": "boss@example.com", "displayName": "Boss", "responseStatus": "accepted"},
            {"email": "me@example.com", "self": True, "responseStatus": "tentative"},
        ],
        "conferenceData": {
            "entryPoints": [
                {"entryPointType": "phone", "uri": "tel:+1-555-0100"},
                {"entryPointType": "video", "uri": "https://meet.google.com/abc-defg-hij"},
                {"entryPointType": "video", "uri": "https://meet.google.com/second"},
            ]
        },
    }


@pytest.fixture
def cronofy_event() -> dict:
    """A Cronofy event as returned by the read events endpoint."""
    return {
        "calendar_id": "cal_n23kjnwrw2_jsdfjksn234",
        "event_uid": "evt_external_54008b1a4a41730f8d5c6037",
        "summary": "Company Retreat",
        "description": "",
        "start": "2026-01-20T09:00:00Z",
        "end": "2026-01-20T17:00:00Z",
        "deleted": False,
        "created": "2026-01-01T08:00:00Z",
        "updated": "2026-01-02T08:00:00Z",
        "location": {"description": "Beach"},
        "participation_status": "accepted",
        "attendees": [
            {"email": "example@cronofy.com", "display_name": "Example Person", "status": "needs_action"},
            {"email": "nobody@cronofy.com", "status": "declined"},
        ],
        "organizer": {"email": "example@cronofy.com", "display_name": "Example Person"},
        "transparency": "opaque",
        "status": "confirmed",
        "categories": [],
        "recurring": False,
        "event_private": False,
        "options": {"delete": True, "update": True, "change_participation_status": True},
        "meeting_url": "https://zoom.us/j/123",
    }
