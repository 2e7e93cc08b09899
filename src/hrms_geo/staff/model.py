from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import SystemRole

ADMIN_ROLES = frozenset({SystemRole.SUPER_ADMIN.value, SystemRole.ADMIN.value})


@dataclass(frozen=True)
class Staff:
    """A login-capable member of a company.

    ``role_name`` is either a built-in role or the name of a custom role
    (``role_id`` then points at the roles table).
    """

    staff_id: int
    company_id: int
    full_name: str
    username: str
    password_hash: str
    role_name: str = SystemRole.EMPLOYEE.value
    branch_id: Optional[int] = None
    shift_id: Optional[int] = None
    role_id: Optional[int] = None
    daily_salary: Optional[float] = None
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role_name in ADMIN_ROLES
