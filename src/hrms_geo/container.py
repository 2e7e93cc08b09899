from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .branches.mysql_branch_repository import MySQLBranchRepository
from .branches.service import BranchService
from .companies.mysql_company_repository import MySQLCompanyRepository
from .core.constants import DEFAULT_LATE_GRACE_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .geocoding.client import ReverseGeocoder
from .lms.mysql_live_session_repository import MySQLLiveSessionRepository
from .lms.service import LiveSessionService
from .payroll.service import PayrollReportService
from .presence.mysql_presence_repository import MySQLPresenceRepository
from .presence.service import PresenceService
from .realtime.hub import EventHub
from .roles.mysql_role_repository import MySQLRoleRepository
from .roles.service import RoleService
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .staff.mysql_staff_repository import MySQLStaffRepository
from .staff.service import AuthService, StaffService
from .tasks.mysql_task_repository import MySQLTaskPingRepository, MySQLTaskRepository
from .tasks.service import TaskTrackingService


@dataclass(frozen=True)
class Container:
    events: EventHub

    auth_service: AuthService
    staff_service: StaffService
    attendance_service: AttendanceService
    payroll_report_service: PayrollReportService
    presence_service: PresenceService
    task_tracking_service: TaskTrackingService
    role_service: RoleService
    live_session_service: LiveSessionService

    conn: Optional[DatabaseConnection] = None


def build_geocoder(settings) -> Optional[ReverseGeocoder]:
    if not getattr(settings, "GEOCODER_ENABLED", False):
        return None
    return ReverseGeocoder(
        getattr(settings, "GEOCODER_URL"),
        user_agent=getattr(settings, "GEOCODER_USER_AGENT", "hrms-geo"),
        timeout=float(getattr(settings, "GEOCODER_TIMEOUT", 5)),
    )


def build_container(*, db_config: dict, settings=None, events: Optional[EventHub] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    events = events or EventHub()
    geocoder = build_geocoder(settings)

    staff_repo = MySQLStaffRepository(conn)
    shifts_repo = MySQLShiftRepository(conn)
    companies_repo = MySQLCompanyRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    branch_service = BranchService(MySQLBranchRepository(conn))

    attendance_service = AttendanceService(
        attendance_repo,
        staff_repo,
        shifts_repo,
        companies_repo,
        strategy_factory=AttendanceStrategyFactory(),
        grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", DEFAULT_LATE_GRACE_MINUTES)),
    )
    presence_service = PresenceService(
        MySQLPresenceRepository(conn),
        attendance_repo,
        staff_repo,
        branch_service,
        geocoder=geocoder,
        events=events,
    )
    task_tracking_service = TaskTrackingService(
        MySQLTaskRepository(conn),
        MySQLTaskPingRepository(conn),
        staff_repo,
        branch_service,
        geocoder=geocoder,
    )

    return Container(
        events=events,
        auth_service=AuthService(staff_repo),
        staff_service=StaffService(staff_repo),
        attendance_service=attendance_service,
        payroll_report_service=PayrollReportService(attendance_repo),
        presence_service=presence_service,
        task_tracking_service=task_tracking_service,
        role_service=RoleService(MySQLRoleRepository(conn)),
        live_session_service=LiveSessionService(MySQLLiveSessionRepository(conn), events=events),
        conn=conn,
    )
