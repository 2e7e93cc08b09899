from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Role


class RoleRepository(Protocol):
    def list_by_company(self, company_id: int) -> Sequence[Role]:
        raise NotImplementedError

    def get_by_id(self, role_id: int) -> Optional[Role]:
        raise NotImplementedError

    def get_by_name(self, company_id: int, name: str) -> Optional[Role]:
        """Case-insensitive lookup within one company."""

        raise NotImplementedError

    def create(
        self,
        *,
        company_id: int,
        name: str,
        description: Optional[str],
        permissions: Sequence[str],
        created_by: Optional[int],
        is_system_role: bool = False,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        role_id: int,
        *,
        name: str,
        description: Optional[str],
        permissions: Sequence[str],
        is_active: bool,
    ) -> bool:
        raise NotImplementedError

    def update_hierarchy(
        self,
        role_id: int,
        *,
        parent_role_id: Optional[int],
        hierarchy_level: int,
        display_order: int,
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, role_id: int) -> bool:
        raise NotImplementedError
