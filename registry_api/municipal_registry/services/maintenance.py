from __future__ import annotations

import logging
from typing import Optional

from municipal_registry.core.ledger import Ledger
from municipal_registry.repositories.maintenance import MaintenanceTaskRepository
from municipal_registry.schemas.common import ErrorCode, Result
from municipal_registry.schemas.maintenance import MaintenanceTask, TaskPriority, TaskStatus
from municipal_registry.services.base import BaseService, coerce_enum

logger = logging.getLogger(__name__)


class MaintenanceService(BaseService):
    """
    Maintenance scheduler.

    Tasks reference assets by id only; the asset registry is never consulted.
    Assignment is allowed only while a task is still scheduled and unassigned.
    Status updates accept any TaskStatus from the creator or the assigned
    worker, including moves out of COMPLETED or CANCELLED.
    """

    logger = logger

    def __init__(self, ledger: Ledger, repo: Optional[MaintenanceTaskRepository] = None) -> None:
        super().__init__(ledger)
        self.repo = repo if repo is not None else MaintenanceTaskRepository()

    # PUBLIC_INTERFACE
    def create_task(
        self,
        caller: str,
        asset_id: int,
        description: str,
        priority: int,
        scheduled_date: int,
    ) -> Result[int]:
        """Create a scheduled, unassigned task; returns the new task id."""
        with self.ledger.transaction() as write:
            level = coerce_enum(TaskPriority, priority)
            if level is None:
                return self._reject("create_task", ErrorCode.INVALID_TYPE, priority=priority)
            task = self.repo.create_task(
                asset_id=asset_id,
                description=description,
                priority=level,
                scheduled_date=scheduled_date,
                created_by=caller,
            )
            write.accept()
        logger.info(
            "Created task id=%d asset_id=%d priority=%s by=%s",
            task.id, asset_id, level.name, caller,
        )
        return Result.success(task.id)

    # PUBLIC_INTERFACE
    def assign_task(self, caller: str, task_id: int, worker: str) -> Result[bool]:
        """
        Assign a scheduled task to a worker.

        Only the task creator may assign. A task that already has a worker, or
        that has left SCHEDULED, cannot be assigned. The status is untouched.
        """
        with self.ledger.transaction() as write:
            task = self.repo.get(task_id)
            if task is None:
                return self._reject("assign_task", ErrorCode.NOT_FOUND, task_id=task_id)
            if task.created_by != caller:
                return self._reject("assign_task", ErrorCode.NOT_AUTHORIZED, task_id=task_id)
            if task.status != TaskStatus.SCHEDULED or task.assigned_to is not None:
                return self._reject(
                    "assign_task", ErrorCode.INVALID_TRANSITION,
                    task_id=task_id, status=task.status.name, assigned_to=task.assigned_to,
                )
            self.repo.update(task, assigned_to=worker)
            write.accept()
        logger.info("Assigned task id=%d to %s", task_id, worker)
        return Result.success(True)

    # PUBLIC_INTERFACE
    def update_task_status(self, caller: str, task_id: int, new_status: int) -> Result[bool]:
        """
        Set a task's status.

        Moving to COMPLETED stamps completion_date with the current ledger
        height. Other moves keep whatever completion_date is already stored.
        """
        # TODO: enforce forward-only moves (SCHEDULED -> IN_PROGRESS -> COMPLETED/CANCELLED).
        with self.ledger.transaction() as write:
            status = coerce_enum(TaskStatus, new_status)
            if status is None:
                return self._reject("update_task_status", ErrorCode.INVALID_STATUS, status=new_status)
            task = self.repo.get(task_id)
            if task is None:
                return self._reject("update_task_status", ErrorCode.NOT_FOUND, task_id=task_id)
            if caller != task.created_by and caller != task.assigned_to:
                return self._reject("update_task_status", ErrorCode.NOT_AUTHORIZED, task_id=task_id)
            changes = {"status": status}
            if status == TaskStatus.COMPLETED:
                changes["completion_date"] = write.height
            self.repo.update(task, **changes)
            write.accept()
        logger.info("Task id=%d status %s -> %s", task_id, task.status.name, status.name)
        return Result.success(True)

    # PUBLIC_INTERFACE
    def get_task(self, task_id: int) -> Optional[MaintenanceTask]:
        """Return the task, or None when the id is unknown."""
        return self.repo.get(task_id)

    # PUBLIC_INTERFACE
    def get_task_count(self) -> int:
        """Number of tasks ever created."""
        return self.repo.counter.current
