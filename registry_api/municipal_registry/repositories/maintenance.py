from __future__ import annotations

from typing import Any

from municipal_registry.schemas.maintenance import MaintenanceTask, TaskPriority, TaskStatus
from .base import BaseRepository


class MaintenanceTaskRepository(BaseRepository[MaintenanceTask]):
    """Repository for maintenance tasks."""

    def create_task(
        self,
        *,
        asset_id: int,
        description: str,
        priority: TaskPriority,
        scheduled_date: int,
        created_by: str,
    ) -> MaintenanceTask:
        task_id = self.next_id()
        task = MaintenanceTask(
            id=task_id,
            asset_id=asset_id,
            description=description,
            priority=priority,
            scheduled_date=scheduled_date,
            completion_date=None,
            status=TaskStatus.SCHEDULED,
            assigned_to=None,
            created_by=created_by,
        )
        return self.add(task_id, task)

    def update(self, task: MaintenanceTask, **changes: Any) -> MaintenanceTask:
        return self.save(task.id, task.model_copy(update=changes))
