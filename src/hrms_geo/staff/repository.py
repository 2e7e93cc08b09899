from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Staff


class StaffRepository(Protocol):
    """Services depend on this interface, never on a concrete database."""

    def get_by_id(self, staff_id: int) -> Optional[Staff]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Staff]:
        raise NotImplementedError

    def list_by_company(self, company_id: int) -> Sequence[Staff]:
        raise NotImplementedError
