from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.exceptions import AuthenticationError, NotFoundError
from .model import Staff
from .repository import StaffRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionStaff:
    """What we store into the Flask session after login."""

    staff_id: int
    company_id: int
    full_name: str
    role_name: str
    role_id: Optional[int]
    branch_id: Optional[int]

    @classmethod
    def from_staff(cls, staff: Staff) -> "SessionStaff":
        return cls(
            staff_id=staff.staff_id,
            company_id=staff.company_id,
            full_name=staff.full_name,
            role_name=staff.role_name,
            role_id=staff.role_id,
            branch_id=staff.branch_id,
        )


class AuthService:
    """Use case: authenticate staff (login) and resolve the current account."""

    def __init__(self, staff: StaffRepository):
        self._staff = staff

    def authenticate(self, username: str, password: str) -> SessionStaff:
        username = require_non_empty(username, "Username")
        staff = self._staff.get_by_username(username)
        if not staff or not staff.is_active:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(staff.password_hash, password or "")
        except ValueError:
            # Placeholder or corrupted hashes.
            ok = False

        if not ok:
            logger.info("login rejected", extra={"staff_id": staff.staff_id})
            raise AuthenticationError("Invalid username or password")

        return SessionStaff.from_staff(staff)

    def current(self, staff_id: int) -> Staff:
        staff = self._staff.get_by_id(staff_id)
        if not staff or not staff.is_active:
            raise AuthenticationError("Session expired, please log in again")
        return staff


class StaffService:
    def __init__(self, staff: StaffRepository):
        self._staff = staff

    def get(self, staff_id: int) -> Staff:
        staff = self._staff.get_by_id(staff_id)
        if not staff:
            raise NotFoundError("Staff not found")
        return staff

    def list_company_staff(self, company_id: int):
        return self._staff.list_by_company(company_id)
