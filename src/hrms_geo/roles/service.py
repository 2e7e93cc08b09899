from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.validators import require_int, require_non_empty
from ..core.enums import SystemRole
from ..core.exceptions import NotFoundError, ValidationError
from .model import Role
from .permissions import ACTIONS, MODULES, effective_permissions, normalize_permissions
from .repository import RoleRepository

logger = logging.getLogger(__name__)

SYSTEM_ROLE_NAMES = frozenset(r.value.lower() for r in SystemRole)

UNSET: Any = object()


class RoleService:
    """Use case: manage a company's custom roles and their hierarchy."""

    def __init__(self, roles: RoleRepository):
        self._roles = roles

    def configuration(self) -> dict[str, list[str]]:
        return {
            "modules": list(MODULES),
            "actions": list(ACTIONS),
            "systemRoles": [r.value for r in SystemRole],
        }

    def list_roles(self, company_id: int) -> Sequence[Role]:
        return self._roles.list_by_company(company_id)

    def get_role(self, company_id: int, role_id: int) -> Role:
        role = self._roles.get_by_id(role_id)
        if not role or role.company_id != company_id:
            raise NotFoundError("Role not found")
        return role

    def _check_name_free(self, company_id: int, name: str, *, exclude_id: Optional[int] = None) -> None:
        if name.lower() in SYSTEM_ROLE_NAMES:
            raise ValidationError(f"'{name}' is a system role name")
        existing = self._roles.get_by_name(company_id, name)
        if existing and existing.role_id != exclude_id:
            raise ValidationError("A role with this name already exists")

    def create_role(
        self,
        company_id: int,
        *,
        name: str,
        description: Optional[str] = None,
        permissions: Any = None,
        created_by: Optional[int] = None,
    ) -> Role:
        name = require_non_empty(name, "Role name")
        self._check_name_free(company_id, name)
        perms = normalize_permissions(permissions)

        role_id = self._roles.create(
            company_id=company_id,
            name=name,
            description=(description or "").strip() or None,
            permissions=perms,
            created_by=created_by,
        )
        logger.info("role created name=%s permissions=%d", name, len(perms), extra={"staff_id": created_by})
        return self.get_role(company_id, role_id)

    def update_role(
        self,
        company_id: int,
        role_id: int,
        *,
        name: Optional[str] = None,
        description: Any = UNSET,
        permissions: Any = None,
        is_active: Optional[bool] = None,
    ) -> Role:
        role = self.get_role(company_id, role_id)

        new_name = role.name
        if name is not None:
            new_name = require_non_empty(name, "Role name")
            if new_name != role.name:
                if role.is_system_role:
                    raise ValidationError("System roles cannot be renamed")
                self._check_name_free(company_id, new_name, exclude_id=role.role_id)

        new_description = role.description
        if description is not UNSET:
            new_description = (description or "").strip() or None

        self._roles.update(
            role.role_id,
            name=new_name,
            description=new_description,
            permissions=normalize_permissions(permissions) if permissions is not None else role.permissions,
            is_active=role.is_active if is_active is None else bool(is_active),
        )
        return self.get_role(company_id, role_id)

    def delete_role(self, company_id: int, role_id: int) -> None:
        role = self.get_role(company_id, role_id)
        if role.is_system_role:
            raise ValidationError("System roles cannot be deleted")
        if any(r.parent_role_id == role.role_id for r in self._roles.list_by_company(company_id)):
            raise ValidationError("Reassign child roles before deleting this role")
        if not self._roles.delete_by_id(role.role_id):
            raise ValidationError("Failed to delete role")
        logger.info("role deleted name=%s", role.name)

    def hierarchy(self, company_id: int) -> dict[str, list[dict[str, Any]]]:
        roles = list(self._roles.list_by_company(company_id))
        ids = {r.role_id for r in roles}

        def sort_key(r: Role):
            return (r.display_order, r.name.lower())

        children: dict[Optional[int], list[Role]] = {}
        for r in roles:
            parent = r.parent_role_id if r.parent_role_id in ids else None
            children.setdefault(parent, []).append(r)

        def node(r: Role) -> dict[str, Any]:
            return {
                "id": r.role_id,
                "name": r.name,
                "parentRoleId": r.parent_role_id,
                "hierarchyLevel": r.hierarchy_level,
                "displayOrder": r.display_order,
                "children": [node(c) for c in sorted(children.get(r.role_id, []), key=sort_key)],
            }

        flat = [
            {
                "id": r.role_id,
                "name": r.name,
                "parentRoleId": r.parent_role_id,
                "hierarchyLevel": r.hierarchy_level,
                "displayOrder": r.display_order,
            }
            for r in sorted(roles, key=lambda r: (r.hierarchy_level, r.display_order, r.name.lower()))
        ]
        return {"hierarchy": [node(r) for r in sorted(children.get(None, []), key=sort_key)], "flat": flat}

    def update_hierarchy(
        self,
        company_id: int,
        role_id: int,
        *,
        parent_role_id: Any = UNSET,
        hierarchy_level: Optional[int] = None,
        display_order: Optional[int] = None,
    ) -> Role:
        role = self.get_role(company_id, role_id)

        new_parent = role.parent_role_id
        new_level = role.hierarchy_level
        if parent_role_id is not UNSET:
            new_parent = require_int(parent_role_id, "parentRoleId") if parent_role_id is not None else None
            if new_parent == role.role_id:
                raise ValidationError("A role cannot be its own parent")
            if new_parent is None:
                new_level = 0
            else:
                parent = self.get_role(company_id, new_parent)
                self._reject_cycle(company_id, role.role_id, parent)
                new_level = parent.hierarchy_level + 1

        if hierarchy_level is not None:
            new_level = require_int(hierarchy_level, "hierarchyLevel")
            if new_level < 0:
                raise ValidationError("hierarchyLevel must not be negative")

        self._roles.update_hierarchy(
            role.role_id,
            parent_role_id=new_parent,
            hierarchy_level=new_level,
            display_order=role.display_order if display_order is None else require_int(display_order, "displayOrder"),
        )
        return self.get_role(company_id, role_id)

    def _reject_cycle(self, company_id: int, role_id: int, parent: Role) -> None:
        by_id = {r.role_id: r for r in self._roles.list_by_company(company_id)}
        seen: set[int] = set()
        current: Optional[Role] = parent
        while current is not None:
            if current.role_id == role_id:
                raise ValidationError("Role hierarchy cannot contain cycles")
            if current.role_id in seen:
                break
            seen.add(current.role_id)
            current = by_id.get(current.parent_role_id) if current.parent_role_id else None

    def permissions_for(self, company_id: int, role_name: Optional[str], role_id: Optional[int]) -> tuple[str, ...]:
        role = None
        if role_id:
            role = self._roles.get_by_id(role_id)
            if role and role.company_id != company_id:
                role = None
        if role is None and role_name:
            role = self._roles.get_by_name(company_id, role_name)
        return effective_permissions(role_name, role)
