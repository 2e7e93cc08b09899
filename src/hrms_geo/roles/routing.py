"""Landing routes per role. Unknown or missing roles get the generic routes."""

from __future__ import annotations

from typing import Optional

from ..core.enums import SystemRole

DEFAULT_DASHBOARD = "/dashboard"
DEFAULT_PROFILE = "/profile"

DASHBOARDS = {
    SystemRole.SUPER_ADMIN.value: "/super-admin/dashboard",
    SystemRole.ADMIN.value: "/admin/dashboard",
    SystemRole.EMPLOYEE.value: "/employee/dashboard",
    SystemRole.CANDIDATE.value: "/candidate/dashboard",
}

PROFILES = {
    SystemRole.CANDIDATE.value: "/candidate/profile",
}


def role_dashboard(role: Optional[str]) -> str:
    return DASHBOARDS.get(role or "", DEFAULT_DASHBOARD)


def profile_route(role: Optional[str]) -> str:
    return PROFILES.get(role or "", DEFAULT_PROFILE)
