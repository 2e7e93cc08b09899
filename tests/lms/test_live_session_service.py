from datetime import timedelta

import pytest

from hrms_geo.core.exceptions import ValidationError
from hrms_geo.realtime.hub import company_channel


def test_schedule_notifies_company(container, events, fixed_now):
    with events.subscribe([company_channel(1)]) as sub, events.subscribe([company_channel(2)]) as other:
        session = container.live_session_service.schedule_live_session(
            1,
            title=" Benefits Q&A ",
            date_time="2025-01-10T11:00:00+05:30",
            link="https://meet.example.com/abc",
            created_by=1,
        )
        event = sub.get(timeout=1)
        assert other.get(timeout=0.01) is None

    assert session.title == "Benefits Q&A"
    assert session.meeting_link == "https://meet.example.com/abc"
    assert event.name == "new-live-session"
    assert event.data["dateTime"] == "2025-01-10T05:30:00Z"
    assert event.data["link"] == "/lms/employee/live-sessions"


def test_schedule_requires_title_and_time(container):
    with pytest.raises(ValidationError):
        container.live_session_service.schedule_live_session(1, title="", date_time="2025-01-10T11:00:00Z")
    with pytest.raises(ValidationError, match="dateTime is required"):
        container.live_session_service.schedule_live_session(1, title="Q&A", date_time=None)
    with pytest.raises(ValidationError):
        container.live_session_service.schedule_live_session(1, title="Q&A", date_time="next tuesday")


def test_upcoming_sessions_skip_past(container, fixed_now):
    svc = container.live_session_service
    svc.schedule_live_session(1, title="Past", date_time=fixed_now - timedelta(days=1))
    svc.schedule_live_session(1, title="Later", date_time=fixed_now + timedelta(days=2))
    svc.schedule_live_session(1, title="Soon", date_time=fixed_now + timedelta(hours=1))

    upcoming = svc.upcoming_sessions(1, now=fixed_now)

    assert [s.title for s in upcoming] == ["Soon", "Later"]
