from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timezone
from types import SimpleNamespace
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from hrms_geo.attendance.factory import AttendanceStrategyFactory
from hrms_geo.attendance.model import AttendanceRecord, AttendanceReportRow
from hrms_geo.attendance.service import AttendanceService
from hrms_geo.branches.model import Branch, Geofence
from hrms_geo.branches.service import BranchService
from hrms_geo.companies.model import Company
from hrms_geo.container import Container
from hrms_geo.core.enums import AttendanceStatus, SystemRole, TaskStatus
from hrms_geo.geocoding.client import ResolvedAddress
from hrms_geo.lms.model import LiveSession
from hrms_geo.lms.service import LiveSessionService
from hrms_geo.payroll.service import PayrollReportService
from hrms_geo.presence.model import storable_presence_status
from hrms_geo.presence.service import PresenceService
from hrms_geo.realtime.hub import EventHub
from hrms_geo.roles.model import Role
from hrms_geo.roles.service import RoleService
from hrms_geo.shifts.model import Shift
from hrms_geo.staff.model import Staff
from hrms_geo.staff.service import AuthService, StaffService
from hrms_geo.tasks.model import Task
from hrms_geo.tasks.service import TaskTrackingService

OFFICE = (12.9716, 77.5946)
PASSWORD_HASH = generate_password_hash("secret123")


class InMemoryStaff:
    def __init__(self, staff: list[Staff]):
        self.by_id = {s.staff_id: s for s in staff}

    def get_by_id(self, staff_id: int) -> Optional[Staff]:
        return self.by_id.get(staff_id)

    def get_by_username(self, username: str) -> Optional[Staff]:
        return next((s for s in self.by_id.values() if s.username == username), None)

    def list_by_company(self, company_id: int):
        return [s for s in self.by_id.values() if s.company_id == company_id and s.is_active]


class InMemoryShifts:
    def __init__(self, shifts: list[Shift]):
        self.by_id = {s.shift_id: s for s in shifts}

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        return self.by_id.get(shift_id)


class InMemoryCompanies:
    def __init__(self, companies: list[Company]):
        self.by_id = {c.company_id: c for c in companies}

    def get_by_id(self, company_id: int) -> Optional[Company]:
        return self.by_id.get(company_id)


class InMemoryBranches:
    def __init__(self, branches: list[Branch]):
        self.by_id = {b.branch_id: b for b in branches}

    def get_by_id(self, branch_id: int) -> Optional[Branch]:
        return self.by_id.get(branch_id)


class InMemoryAttendance:
    def __init__(self):
        self.by_staff_date: dict[tuple[int, date], AttendanceRecord] = {}
        self._id = 0

    def put(self, record: AttendanceRecord) -> AttendanceRecord:
        self.by_staff_date[(record.staff_id, record.work_date)] = record
        return record

    def get_for_staff_and_date(self, staff_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self.by_staff_date.get((staff_id, work_date))

    def create_punch_in(self, *, staff_id, work_date, punch_in, status, late_minutes=0, fine_amount=0.0, note=None) -> int:
        self._id += 1
        self.put(
            AttendanceRecord(
                attendance_id=self._id,
                staff_id=staff_id,
                work_date=work_date,
                punch_in=punch_in,
                punch_out=None,
                status=status,
                late_minutes=late_minutes,
                fine_amount=fine_amount,
                note=note,
            )
        )
        return self._id

    def update_punch_out(self, *, attendance_id, punch_out, status, early_minutes=0, fine_amount=0.0, note=None) -> bool:
        for key, rec in list(self.by_staff_date.items()):
            if rec.attendance_id == attendance_id:
                self.by_staff_date[key] = replace(
                    rec,
                    punch_out=punch_out,
                    status=status,
                    early_minutes=early_minutes,
                    fine_amount=fine_amount,
                    note=note,
                )
                return True
        return False

    def upsert_leave(self, *, staff_id, work_date, leave_type) -> int:
        existing = self.by_staff_date.get((staff_id, work_date))
        if existing:
            self.put(replace(existing, status=AttendanceStatus.ON_LEAVE, leave_type=leave_type))
            return existing.attendance_id
        self._id += 1
        self.put(
            AttendanceRecord(
                attendance_id=self._id,
                staff_id=staff_id,
                work_date=work_date,
                punch_in=None,
                punch_out=None,
                status=AttendanceStatus.ON_LEAVE,
                leave_type=leave_type,
            )
        )
        return self._id

    def get_report_rows(self, *, company_id, start_date, end_date, staff_id=None):
        return []


class InMemoryPresence:
    def __init__(self):
        self.records = []

    def add(self, record) -> int:
        storable_presence_status(record.presence_status)
        new_id = len(self.records) + 1
        self.records.append(replace(record, presence_id=new_id))
        return new_id

    def list_recent(self, *, company_id, staff_id=None, start=None, end=None, limit=500):
        items = [
            r
            for r in self.records
            if r.company_id == company_id
            and (staff_id is None or r.staff_id == staff_id)
            and (start is None or r.timestamp >= start)
            and (end is None or r.timestamp <= end)
        ]
        items.sort(key=lambda r: r.timestamp, reverse=True)
        return items[:limit]

    def latest_per_staff(self, company_id):
        latest = {}
        for r in sorted(self.records, key=lambda r: r.timestamp):
            if r.company_id == company_id:
                latest[r.staff_id] = r
        return sorted(latest.values(), key=lambda r: r.timestamp, reverse=True)

    def list_for_staff_between(self, staff_id, start, end):
        items = [r for r in self.records if r.staff_id == staff_id and start <= r.timestamp < end]
        return sorted(items, key=lambda r: r.timestamp)


class InMemoryTasks:
    def __init__(self, tasks: list[Task]):
        self.by_id = {t.task_id: t for t in tasks}

    def get_by_id(self, task_id: int) -> Optional[Task]:
        return self.by_id.get(task_id)

    def get_by_code(self, task_code: str) -> Optional[Task]:
        return next((t for t in self.by_id.values() if t.task_code == task_code), None)


class InMemoryTaskPings:
    def __init__(self, tasks: InMemoryTasks):
        self._tasks = tasks
        self.pings = []
        self.last_limit = None

    def add(self, ping) -> int:
        new_id = len(self.pings) + 1
        self.pings.append(replace(ping, ping_id=new_id))
        return new_id

    def list_recent(self, *, company_id, task_id=None, staff_id=None, start=None, end=None, limit=500):
        self.last_limit = limit
        items = [
            p
            for p in self.pings
            if self._tasks.get_by_id(p.task_id).company_id == company_id
            and (task_id is None or p.task_id == task_id)
            and (staff_id is None or p.staff_id == staff_id)
        ]
        items.sort(key=lambda p: p.timestamp, reverse=True)
        return items[:limit]


class InMemoryRoles:
    def __init__(self, roles: Optional[list[Role]] = None):
        self.by_id = {r.role_id: r for r in roles or []}

    def list_by_company(self, company_id):
        return [r for r in self.by_id.values() if r.company_id == company_id]

    def get_by_id(self, role_id):
        return self.by_id.get(role_id)

    def get_by_name(self, company_id, name):
        return next(
            (r for r in self.by_id.values() if r.company_id == company_id and r.name.lower() == name.lower()),
            None,
        )

    def create(self, *, company_id, name, description, permissions, created_by, is_system_role=False) -> int:
        new_id = max(self.by_id, default=0) + 1
        self.by_id[new_id] = Role(
            role_id=new_id,
            company_id=company_id,
            name=name,
            description=description,
            permissions=tuple(permissions),
            created_by=created_by,
            is_system_role=is_system_role,
        )
        return new_id

    def update(self, role_id, *, name, description, permissions, is_active) -> bool:
        role = self.by_id[role_id]
        self.by_id[role_id] = replace(
            role, name=name, description=description, permissions=tuple(permissions), is_active=is_active
        )
        return True

    def update_hierarchy(self, role_id, *, parent_role_id, hierarchy_level, display_order) -> bool:
        role = self.by_id[role_id]
        self.by_id[role_id] = replace(
            role, parent_role_id=parent_role_id, hierarchy_level=hierarchy_level, display_order=display_order
        )
        return True

    def delete_by_id(self, role_id) -> bool:
        return self.by_id.pop(role_id, None) is not None


class InMemoryLiveSessions:
    def __init__(self):
        self.by_id: dict[int, LiveSession] = {}

    def create(self, *, company_id, title, starts_at, description, meeting_link, created_by) -> int:
        new_id = len(self.by_id) + 1
        self.by_id[new_id] = LiveSession(
            session_id=new_id,
            company_id=company_id,
            title=title,
            starts_at=starts_at,
            description=description,
            meeting_link=meeting_link,
            created_by=created_by,
        )
        return new_id

    def get_by_id(self, session_id):
        return self.by_id.get(session_id)

    def list_upcoming(self, company_id, *, since, limit):
        items = [s for s in self.by_id.values() if s.company_id == company_id and s.starts_at >= since]
        return sorted(items, key=lambda s: s.starts_at)[:limit]


class FakeGeocoder:
    def __init__(self, address: Optional[ResolvedAddress] = None, error: Optional[Exception] = None):
        self._address = address or ResolvedAddress(
            address="MG Road, Ashok Nagar, Bengaluru",
            full_address="MG Road, Ashok Nagar, Bengaluru, Karnataka 560001, India",
            city="Bengaluru",
            area="Ashok Nagar",
            pincode="560001",
        )
        self._error = error
        self.calls = []

    def reverse(self, lat: float, lng: float) -> ResolvedAddress:
        self.calls.append((lat, lng))
        if self._error is not None:
            raise self._error
        return self._address


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 1, 6, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def repos():
    companies = InMemoryCompanies(
        [
            Company(
                company_id=1,
                company_name="Acme",
                settings={
                    "payroll": {
                        "fineCalculation": {
                            "enabled": True,
                            "graceTimeMinutes": 10,
                            "calculationMethod": "shiftBased",
                        }
                    }
                },
            ),
            Company(company_id=2, company_name="Other Co"),
        ]
    )
    branches = InMemoryBranches(
        [
            Branch(
                branch_id=10,
                company_id=1,
                branch_name="HQ",
                geofence=Geofence(enabled=True, latitude=OFFICE[0], longitude=OFFICE[1], radius_m=None),
            ),
            Branch(branch_id=11, company_id=1, branch_name="Remote", geofence=Geofence(enabled=False)),
        ]
    )
    shifts = InMemoryShifts(
        [Shift(shift_id=1, shift_name="General", start_time=time(9, 0), end_time=time(18, 0), break_minutes=60)]
    )
    staff = InMemoryStaff(
        [
            Staff(
                staff_id=1,
                company_id=1,
                full_name="Asha Admin",
                username="admin",
                password_hash=PASSWORD_HASH,
                role_name=SystemRole.ADMIN.value,
                branch_id=10,
                shift_id=1,
            ),
            Staff(
                staff_id=2,
                company_id=1,
                full_name="Ravi Kumar",
                username="ravi",
                password_hash=PASSWORD_HASH,
                role_name=SystemRole.EMPLOYEE.value,
                branch_id=10,
                shift_id=1,
                daily_salary=900.0,
            ),
            Staff(
                staff_id=3,
                company_id=2,
                full_name="Outsider",
                username="outsider",
                password_hash=PASSWORD_HASH,
                role_name=SystemRole.EMPLOYEE.value,
            ),
        ]
    )
    tasks = InMemoryTasks(
        [
            Task(task_id=100, company_id=1, task_code="TASK-20250106-0001", title="Site visit", status=TaskStatus.IN_PROGRESS, assigned_to=2),
            Task(task_id=101, company_id=1, task_code="TASK-20250106-0002", title="Delivery", status=TaskStatus.PENDING, assigned_to=2),
            Task(task_id=200, company_id=2, task_code="TASK-20250106-0003", title="Foreign", status=TaskStatus.PENDING),
        ]
    )
    return SimpleNamespace(
        companies=companies,
        branches=branches,
        shifts=shifts,
        staff=staff,
        attendance=InMemoryAttendance(),
        presence=InMemoryPresence(),
        tasks=tasks,
        task_pings=InMemoryTaskPings(tasks),
        roles=InMemoryRoles(),
        live_sessions=InMemoryLiveSessions(),
    )


@pytest.fixture
def open_attendance(repos, fixed_now):
    """Staff 2 punched in today and is still at work."""

    return repos.attendance.put(
        AttendanceRecord(
            attendance_id=500,
            staff_id=2,
            work_date=fixed_now.date(),
            punch_in=fixed_now.replace(hour=8, minute=55),
            punch_out=None,
            status=AttendanceStatus.ON_TIME,
        )
    )


@pytest.fixture
def events() -> EventHub:
    return EventHub(queue_size=10)


@pytest.fixture
def container(repos, events) -> Container:
    branch_service = BranchService(repos.branches)
    return Container(
        events=events,
        auth_service=AuthService(repos.staff),
        staff_service=StaffService(repos.staff),
        attendance_service=AttendanceService(
            repos.attendance,
            repos.staff,
            repos.shifts,
            repos.companies,
            strategy_factory=AttendanceStrategyFactory(),
            grace_minutes=5,
        ),
        payroll_report_service=PayrollReportService(repos.attendance),
        presence_service=PresenceService(repos.presence, repos.attendance, repos.staff, branch_service, events=events),
        task_tracking_service=TaskTrackingService(repos.tasks, repos.task_pings, repos.staff, branch_service),
        role_service=RoleService(repos.roles),
        live_session_service=LiveSessionService(repos.live_sessions, events=events),
    )


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from hrms_geo.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login_as(client, repos):
    def _login(staff_id: int, on=None):
        target = on or client
        staff = repos.staff.get_by_id(staff_id)
        with target.session_transaction() as sess:
            sess["staff_id"] = staff.staff_id
            sess["company_id"] = staff.company_id
            sess["name"] = staff.full_name
            sess["role"] = staff.role_name
            sess["role_id"] = staff.role_id
            sess["branch_id"] = staff.branch_id
        return target

    return _login


def report_row(**overrides) -> AttendanceReportRow:
    values = dict(
        staff_id=2,
        full_name="Ravi Kumar",
        username="ravi",
        shift_name="General",
        break_minutes=60,
        work_date=date(2025, 1, 6),
        punch_in=datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc),
        punch_out=datetime(2025, 1, 6, 18, 0, tzinfo=timezone.utc),
        status=AttendanceStatus.ON_TIME,
    )
    values.update(overrides)
    return AttendanceReportRow(**values)


@pytest.fixture
def make_report_row():
    return report_row
