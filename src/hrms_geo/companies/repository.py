from __future__ import annotations

from typing import Optional, Protocol

from .model import Company


class CompanyRepository(Protocol):
    def get_by_id(self, company_id: int) -> Optional[Company]:
        raise NotImplementedError
