import json

from hrms_geo.realtime.hub import company_channel, staff_channel, tracking_channel

from conftest import OFFICE

CONNECTED = b": connected\n\n"


def _open(client, query=""):
    resp = client.get(f"/api/events/stream{query}", buffered=False)
    assert resp.status_code == 200
    assert resp.mimetype == "text/event-stream"
    chunks = iter(resp.response)
    assert next(chunks) == CONNECTED
    return resp, chunks


def _frame(chunk: bytes) -> tuple[str, dict]:
    head, data = chunk.decode().strip().split("\n")
    return head.removeprefix("event: "), json.loads(data.removeprefix("data: "))


def test_stream_delivers_company_and_direct_events(login_as, events):
    resp, chunks = _open(login_as(2))

    assert events.publish(company_channel(1), "new-live-session", {"title": "Town hall"}) == 1
    assert _frame(next(chunks)) == ("new-live-session", {"title": "Town hall"})
    assert events.publish(staff_channel(2), "direct", {"n": 1}) == 1
    assert _frame(next(chunks)) == ("direct", {"n": 1})

    resp.close()
    assert events.subscriber_count() == 0


def test_stream_is_scoped_to_own_company(login_as, events):
    resp, chunks = _open(login_as(3))

    assert events.publish(company_channel(1), "new-live-session", {"title": "Town hall"}) == 0
    assert events.publish(company_channel(2), "new-live-session", {"title": "Other"}) == 1
    assert _frame(next(chunks))[1] == {"title": "Other"}

    resp.close()


def test_keep_alive_comment_when_idle(login_as):
    resp, chunks = _open(login_as(2))

    assert next(chunks) == b": keep-alive\n\n"

    resp.close()


def test_logout_closes_open_stream(login_as, events):
    client = login_as(2)
    resp, chunks = _open(client)
    assert events.subscriber_count(staff_channel(2)) == 1

    client.post("/api/auth/logout")

    assert events.subscriber_count() == 0
    assert list(chunks) == []
    resp.close()


def test_logout_leaves_other_staff_streams_open(app, login_as, events):
    admin = login_as(1)
    resp, chunks = _open(admin)
    employee = login_as(2, on=app.test_client())

    employee.post("/api/auth/logout")

    assert events.subscriber_count(staff_channel(1)) == 1
    events.publish(staff_channel(1), "direct", {})
    assert _frame(next(chunks))[0] == "direct"
    resp.close()


def test_tracking_requires_admin_of_same_company(login_as):
    assert login_as(2).get("/api/events/stream?track=2").status_code == 403

    admin = login_as(1)
    foreign = admin.get("/api/events/stream?track=3")
    assert foreign.status_code == 403
    assert foreign.get_json()["message"] == "Staff belongs to another company"
    assert admin.get("/api/events/stream?track=abc").status_code == 400
    assert admin.get("/api/events/stream?track=999").status_code == 404


def test_admin_follows_location_employee_does_not(app, login_as, container, events, open_attendance, fixed_now):
    admin_resp, admin_chunks = _open(login_as(1), "?track=2")
    employee_resp, employee_chunks = _open(login_as(2, on=app.test_client()))
    assert events.subscriber_count(tracking_channel(2)) == 1

    container.presence_service.store_presence(2, lat=OFFICE[0], lng=OFFICE[1], now=fixed_now)
    name, data = _frame(next(admin_chunks))
    assert name == "tracking:location"
    assert data["staffId"] == 2

    # Next thing the employee sees is the company event, not the location.
    events.publish(company_channel(1), "new-live-session", {"title": "Town hall"})
    assert _frame(next(employee_chunks))[0] == "new-live-session"

    employee_resp.close()
    admin_resp.close()
    assert events.subscriber_count() == 0
