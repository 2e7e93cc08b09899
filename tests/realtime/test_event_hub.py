import json
import logging

from hrms_geo.realtime.events import new_live_session_payload
from hrms_geo.realtime.hub import Event, EventHub, company_channel, staff_channel, tracking_channel


def test_publish_reaches_only_channel_subscribers():
    hub = EventHub(queue_size=5)
    acme = hub.subscribe([company_channel(1)])
    other = hub.subscribe([company_channel(2)])

    delivered = hub.publish(company_channel(1), "ping", {"n": 1})

    assert delivered == 1
    assert acme.get(timeout=0.1).data == {"n": 1}
    assert other.get(timeout=0.01) is None


def test_subscription_on_multiple_channels():
    hub = EventHub()
    sub = hub.subscribe([company_channel(1), staff_channel(7)])

    hub.publish(staff_channel(7), "direct", {})

    assert sub.get(timeout=0.1).name == "direct"
    assert hub.subscriber_count() == 1
    assert hub.subscriber_count(staff_channel(7)) == 1


def test_close_unsubscribes():
    hub = EventHub()
    with hub.subscribe([company_channel(1)]):
        assert hub.subscriber_count(company_channel(1)) == 1

    assert hub.subscriber_count(company_channel(1)) == 0
    assert hub.publish(company_channel(1), "ping", {}) == 0


def test_close_staff_closes_only_owned_subscriptions():
    hub = EventHub()
    mine = hub.subscribe([company_channel(1), staff_channel(2)], owner=2)
    other = hub.subscribe([company_channel(1)], owner=1)

    assert hub.close_staff(2) == 1

    assert mine.closed and not other.closed
    assert hub.subscriber_count() == 1
    assert hub.publish(staff_channel(2), "direct", {}) == 0
    assert hub.close_staff(2) == 0


def test_close_wakes_consumer_even_when_inbox_is_full():
    hub = EventHub(queue_size=1)
    sub = hub.subscribe([tracking_channel(2)], owner=1)
    hub.publish(tracking_channel(2), "tracking:location", {"staffId": 2})

    hub.close_staff(1)

    assert sub.get(timeout=0.1) is None
    assert hub.publish(tracking_channel(2), "tracking:location", {}) == 0


def test_full_queue_drops_and_warns(caplog):
    hub = EventHub(queue_size=1)
    sub = hub.subscribe([company_channel(1)])

    with caplog.at_level(logging.WARNING, logger="hrms_geo.realtime.hub"):
        assert hub.publish(company_channel(1), "first", {}) == 1
        assert hub.publish(company_channel(1), "second", {}) == 0

    assert "queue full" in caplog.text
    assert sub.get(timeout=0.1).name == "first"


def test_sse_frame():
    frame = Event(channel="company:1", name="new-live-session", data={"title": "Onboarding"}).to_sse()

    assert frame.startswith("event: new-live-session\n")
    assert frame.endswith("\n\n")
    assert json.loads(frame.split("data: ", 1)[1]) == {"title": "Onboarding"}


def test_live_session_payload_default_link(fixed_now):
    payload = new_live_session_payload("Onboarding", fixed_now)

    assert payload == {
        "title": "Onboarding",
        "dateTime": "2025-01-06T09:30:00Z",
        "message": "New live session scheduled: Onboarding",
        "link": "/lms/employee/live-sessions",
    }
