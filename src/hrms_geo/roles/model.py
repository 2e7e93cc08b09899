from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import isoformat_utc
from .permissions import group_permissions


@dataclass(frozen=True)
class Role:
    """A named permission bundle scoped to one company.

    Permissions are ``module:action`` strings, e.g. ``"payroll:read"``.
    """

    role_id: int
    company_id: int
    name: str
    permissions: tuple[str, ...] = field(default_factory=tuple)
    description: Optional[str] = None
    is_system_role: bool = False
    is_active: bool = True
    parent_role_id: Optional[int] = None
    hierarchy_level: int = 0
    display_order: int = 0
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.role_id,
            "name": self.name,
            "description": self.description,
            "companyId": self.company_id,
            "permissions": list(self.permissions),
            "modulePermissions": group_permissions(self.permissions),
            "isSystemRole": self.is_system_role,
            "isActive": self.is_active,
            "parentRoleId": self.parent_role_id,
            "hierarchyLevel": self.hierarchy_level,
            "displayOrder": self.display_order,
            "createdBy": self.created_by,
            "createdAt": isoformat_utc(self.created_at),
            "updatedAt": isoformat_utc(self.updated_at),
        }
