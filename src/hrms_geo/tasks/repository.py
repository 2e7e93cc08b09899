from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Task, TaskPing


class TaskRepository(Protocol):
    def get_by_id(self, task_id: int) -> Optional[Task]:
        raise NotImplementedError

    def get_by_code(self, task_code: str) -> Optional[Task]:
        raise NotImplementedError


class TaskPingRepository(Protocol):
    def add(self, ping: TaskPing) -> int:
        raise NotImplementedError

    def list_recent(
        self,
        *,
        company_id: int,
        task_id: Optional[int] = None,
        staff_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 500,
    ) -> Sequence[TaskPing]:
        """Newest first."""

        raise NotImplementedError
