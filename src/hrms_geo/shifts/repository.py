from __future__ import annotations

from typing import Optional, Protocol

from .model import Shift


class ShiftRepository(Protocol):
    """Shifts are only looked up through the staff member they are assigned to."""

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        raise NotImplementedError
