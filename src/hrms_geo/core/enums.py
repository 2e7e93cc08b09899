from __future__ import annotations

from enum import Enum


class SystemRole(str, Enum):
    """Built-in roles every company has; custom roles live in the roles table."""

    SUPER_ADMIN = "Super Admin"
    ADMIN = "Admin"
    SENIOR_HR = "Senior HR"
    HR = "HR"
    MANAGER = "Manager"
    TEAM_LEADER = "Team Leader"
    EMPLOYEE = "Employee"
    CANDIDATE = "Candidate"


class PresenceStatus(str, Enum):
    """Where a staff member was when a location sample was taken."""

    IN_OFFICE = "in_office"
    TASK = "task"
    OUT_OF_OFFICE = "out_of_office"


class TrackingDenial(str, Enum):
    """Why presence tracking is refused for today's attendance state."""

    NO_ATTENDANCE = "no_attendance"
    NO_CHECK_IN = "no_check_in"
    CHECKED_OUT = "checked_out"
    ON_LEAVE = "on_leave"


class AttendanceStatus(str, Enum):
    ON_TIME = "ON_TIME"
    LATE = "LATE"
    EARLY_LEAVE = "EARLY_LEAVE"
    ON_LEAVE = "ON_LEAVE"
    UNKNOWN = "UNKNOWN"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    ARRIVED = "arrived"
    HOLD = "hold"
    EXITED = "exited"
    COMPLETED = "completed"


class FineApplyTo(str, Enum):
    LATE_ARRIVAL = "lateArrival"
    EARLY_EXIT = "earlyExit"
    BOTH = "both"


class FineRuleType(str, Enum):
    ONE_X_SALARY = "1xSalary"
    TWO_X_SALARY = "2xSalary"
    THREE_X_SALARY = "3xSalary"
    HALF_DAY = "halfDay"
    FULL_DAY = "fullDay"
    CUSTOM = "custom"
