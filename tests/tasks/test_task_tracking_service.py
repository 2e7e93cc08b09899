import pytest

from hrms_geo.branches.service import BranchService
from hrms_geo.core.enums import PresenceStatus
from hrms_geo.core.exceptions import NotFoundError, ValidationError
from hrms_geo.tasks.service import TaskTrackingService

from conftest import OFFICE, FakeGeocoder

CLOSE = (OFFICE[0] + 0.00045, OFFICE[1])  # ~50 m
NEAR = (OFFICE[0] + 0.0009, OFFICE[1])  # ~100 m


def test_resolve_task_by_id_or_code(container):
    svc = container.task_tracking_service

    assert svc.resolve_task(1, 100).task_code == "TASK-20250106-0001"
    assert svc.resolve_task(1, "100").task_id == 100
    assert svc.resolve_task(1, "TASK-20250106-0002").task_id == 101


def test_resolve_task_from_other_company_is_not_found(container):
    with pytest.raises(NotFoundError):
        container.task_tracking_service.resolve_task(1, 200)
    with pytest.raises(NotFoundError):
        container.task_tracking_service.resolve_task(1, "TASK-missing")


def test_in_progress_task_ping_is_task_status(container):
    ping = container.task_tracking_service.store_task_ping(1, 1, task_id=100, lat=NEAR[0], lng=NEAR[1])

    assert ping.presence_status == PresenceStatus.TASK
    # Attributed to the assignee, not the admin who sent it.
    assert ping.staff_id == 2
    assert ping.staff_name == "Ravi Kumar"


def test_pending_task_ping_uses_task_radius(container):
    svc = container.task_tracking_service

    close = svc.store_task_ping(2, 1, task_id=101, lat=CLOSE[0], lng=CLOSE[1])
    near = svc.store_task_ping(2, 1, task_id=101, lat=NEAR[0], lng=NEAR[1])

    assert close.presence_status == PresenceStatus.IN_OFFICE
    assert near.presence_status == PresenceStatus.OUT_OF_OFFICE


def test_ping_requires_task_and_coordinates(container):
    with pytest.raises(ValidationError, match="taskId, lat, lng required"):
        container.task_tracking_service.store_task_ping(2, 1, task_id=None, lat=1, lng=2)
    with pytest.raises(ValidationError):
        container.task_tracking_service.store_task_ping(2, 1, task_id=100, lat=None, lng=2)


def test_ping_keeps_destination_and_address(repos):
    svc = TaskTrackingService(
        repos.tasks, repos.task_pings, repos.staff, BranchService(repos.branches), geocoder=FakeGeocoder()
    )

    ping = svc.store_task_ping(
        2,
        1,
        task_id="TASK-20250106-0001",
        lat=NEAR[0],
        lng=NEAR[1],
        destination_lat="12.98",
        destination_lng="77.60",
        battery_percent=55,
    )

    assert ping.destination_latitude == 12.98
    assert ping.destination_longitude == 77.60
    assert ping.area == "Ashok Nagar"
    assert ping.to_dict()["destinationLat"] == 12.98


def test_list_task_pings_filters_and_clamps(container, repos):
    svc = container.task_tracking_service
    svc.store_task_ping(2, 1, task_id=100, lat=NEAR[0], lng=NEAR[1])
    svc.store_task_ping(2, 1, task_id=101, lat=NEAR[0], lng=NEAR[1])

    pings = svc.list_task_pings(1, task_id="TASK-20250106-0001", limit=5000)

    assert [p.task_id for p in pings] == [100]
    assert repos.task_pings.last_limit == 2000
    assert len(svc.list_task_pings(1)) == 2
