from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Company:
    company_id: int
    company_name: str
    settings: dict[str, Any] = field(default_factory=dict)
