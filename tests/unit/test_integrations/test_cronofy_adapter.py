"""Tests for Cronofy adapter (format conversion)."""

from datetime import datetime, timezone

from unical.integrations.cronofy.adapter import CronofyAdapter, parse_meeting_url


class TestToEventResource:
    """Tests for Cronofy event to unified event conversion."""

    def test_event(self, cronofy_event):
        event = CronofyAdapter.to_event_resource(cronofy_event, "https://api.cronofy.com/v1/events/pages/08a07b034306679e")

        assert event.id == "evt_external_54008b1a4a41730f8d5c6037"
        assert event.calendar_id == "cal_n23kjnwrw2_jsdfjksn234"
        assert event.summary == "Company Retreat"
        assert event.location == "Beach"
        assert event.start == datetime(2026, 1, 20, 9, 0, tzinfo=timezone.utc)
        assert event.end == datetime(2026, 1, 20, 17, 0, tzinfo=timezone.utc)
        assert event.private is False
        assert event.meeting_url == "https://zoom.us/j/123"
        assert event.participation_status == "accepted"
        assert event.permissions.delete is True
        assert event.permissions.change_participation_status is True
        assert event.next_page_token.endswith("08a07b034306679e")

    def test_attendees(self, cronofy_event):
        event = CronofyAdapter.to_event_resource(cronofy_event)

        assert event.attendees[0].display_name == "Example Person"
        assert event.attendees[0].status == "needs_action"
        assert event.attendees[1].display_name == ""
        assert event.attendees[1].status == "declined"
        assert event.organizer.email == "example@cronofy.com"

    def test_minimal_event_defaults(self):
        event = CronofyAdapter.to_event_resource({"event_id": "evt-1"})

        assert event.id == "evt-1"
        assert event.private is True
        assert event.participation_status == "needs_action"
        assert event.attendees == []
        assert event.location is None
        assert event.permissions.update is False
        assert event.meeting_url is None

    def test_all_day_event(self):
        event = CronofyAdapter.to_event_resource(
            {"event_uid": "evt-1", "start": "2026-01-20", "end": "2026-01-21"}
        )
        assert event.start == datetime(2026, 1, 20, tzinfo=timezone.utc)
        assert event.end == datetime(2026, 1, 21, tzinfo=timezone.utc)

    def test_localized_time(self):
        event = CronofyAdapter.to_event_resource(
            {
                "event_uid": "evt-1",
                "start": {"time": "2026-01-20T10:00:00+01:00", "tzid": "Europe/Paris"},
                "end": {"time": "2026-01-20T11:00:00+01:00", "tzid": "Europe/Paris"},
            }
        )
        assert event.start == datetime(2026, 1, 20, 9, 0, tzinfo=timezone.utc)
        assert event.end == datetime(2026, 1, 20, 10, 0, tzinfo=timezone.utc)

    def test_unknown_statuses(self):
        event = CronofyAdapter.to_event_resource(
            {
                "event_uid": "evt-1",
                "participation_status": "maybe",
                "attendees": [{"email": "a@example.com", "status": "maybe"}],
            }
        )
        assert event.participation_status == "needs_action"
        assert event.attendees[0].status == "unknown"

    def test_deleted_event(self, cronofy_event):
        cronofy_event["deleted"] = True
        assert CronofyAdapter.to_event_resource(cronofy_event).deleted is True


class TestMeetingUrl:
    """Tests for meeting URL extraction."""

    def test_conferencing_fallback(self):
        assert parse_meeting_url({"conferencing": {"join_url": "https://meet.example.com/x"}}) == (
            "https://meet.example.com/x"
        )

    def test_no_meeting(self):
        assert parse_meeting_url({}) is None


class TestToCalendarResource:
    """Tests for Cronofy calendar conversion."""

    def test_calendar(self):
        calendar = CronofyAdapter.to_calendar_resource(
            {
                "provider_name": "google",
                "profile_id": "pro_n23kjnwrw2",
                "profile_name": "example@cronofy.com",
                "calendar_id": "cal_n23kjnwrw2_jsdfjksn234",
                "calendar_name": "Home",
                "calendar_readonly": False,
                "calendar_deleted": False,
                "calendar_primary": True,
            }
        )

        assert calendar.id == "cal_n23kjnwrw2_jsdfjksn234"
        assert calendar.name == "Home"
        assert calendar.provider_name == "cronofy"
        assert calendar.profile_id == "pro_n23kjnwrw2"
        assert calendar.profile_name == "example@cronofy.com"
        assert calendar.readonly is False
        assert calendar.primary is True
        assert calendar.next_page_token is None

    def test_missing_readonly_flag(self):
        calendar = CronofyAdapter.to_calendar_resource({"calendar_id": "cal-1"})
        assert calendar.readonly is True
        assert calendar.deleted is False
