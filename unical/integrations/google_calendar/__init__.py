"""
Google Calendar integration for Unical.

Direct-provider connector over the Google Calendar API v3.
"""

from unical.integrations.google_calendar.adapter import GoogleCalendarAdapter
from unical.integrations.google_calendar.auth import GoogleCredentialRefresher
from unical.integrations.google_calendar.client import GoogleCalendarClient
from unical.integrations.google_calendar.connector import (
    CHANNEL_ID_DELIMITER,
    GoogleConnector,
    pack_channel_id,
    unpack_channel_id,
)

__all__ = [
    "CHANNEL_ID_DELIMITER",
    "GoogleCalendarAdapter",
    "GoogleCalendarClient",
    "GoogleConnector",
    "GoogleCredentialRefresher",
    "pack_channel_id",
    "unpack_channel_id",
]
