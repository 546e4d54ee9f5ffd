"""Tests for the maintenance scheduler service."""

from __future__ import annotations

import pytest

from municipal_registry.core.ledger import Ledger
from municipal_registry.schemas.common import ErrorCode
from municipal_registry.schemas.maintenance import TaskPriority, TaskStatus
from municipal_registry.services.maintenance import MaintenanceService

from .conftest import MOCK_HEIGHT, OTHER, OWNER, WORKER


@pytest.fixture
def task_id(maintenance) -> int:
    return maintenance.create_task(OWNER, 1, "Clean storm drains", 2, 1620000000).value


class TestCreateTask:

    def test_create_basic(self, maintenance):
        result = maintenance.create_task(OWNER, 1, "Replace bridge bearings", 3, 1620000000)

        assert result.ok
        assert result.value == 1
        task = maintenance.get_task(1)
        assert task.asset_id == 1
        assert task.description == "Replace bridge bearings"
        assert task.priority == TaskPriority.HIGH
        assert task.scheduled_date == 1620000000
        assert task.status == TaskStatus.SCHEDULED
        assert task.assigned_to is None
        assert task.completion_date is None
        assert task.created_by == OWNER

    def test_asset_id_not_checked(self, maintenance):
        assert maintenance.create_task(OWNER, 987654, "Orphan task", 1, 0).ok

    @pytest.mark.parametrize("priority", [0, 5, 10])
    def test_invalid_priority(self, maintenance, priority):
        result = maintenance.create_task(OWNER, 1, "Invalid Task", priority, 1620000000)
        assert result.error == ErrorCode.INVALID_TYPE
        assert maintenance.get_task(1) is None
        assert maintenance.get_task_count() == 0


class TestAssignTask:

    def test_assign(self, maintenance, task_id):
        result = maintenance.assign_task(OWNER, task_id, WORKER)

        assert result.ok
        task = maintenance.get_task(task_id)
        assert task.assigned_to == WORKER
        assert task.status == TaskStatus.SCHEDULED

    def test_assign_twice_fails(self, maintenance, task_id):
        assert maintenance.assign_task(OWNER, task_id, "worker-A").ok

        result = maintenance.assign_task(OWNER, task_id, "worker-B")

        assert result.error == ErrorCode.INVALID_TRANSITION
        assert maintenance.get_task(task_id).assigned_to == "worker-A"

    @pytest.mark.parametrize("status", [TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED, TaskStatus.CANCELLED])
    def test_assign_after_leaving_scheduled(self, maintenance, task_id, status):
        maintenance.update_task_status(OWNER, task_id, status)
        assert maintenance.assign_task(OWNER, task_id, WORKER).error == ErrorCode.INVALID_TRANSITION

    def test_unknown_task(self, maintenance):
        assert maintenance.assign_task(OWNER, 404, WORKER).error == ErrorCode.NOT_FOUND

    def test_only_creator_assigns(self, maintenance, task_id):
        assert maintenance.assign_task(OTHER, task_id, OTHER).error == ErrorCode.NOT_AUTHORIZED
        assert maintenance.get_task(task_id).assigned_to is None


class TestUpdateTaskStatus:

    def test_creator_updates(self, maintenance, task_id):
        result = maintenance.update_task_status(OWNER, task_id, TaskStatus.IN_PROGRESS)
        assert result.ok
        assert maintenance.get_task(task_id).status == TaskStatus.IN_PROGRESS

    def test_assigned_worker_updates(self, maintenance, task_id):
        maintenance.assign_task(OWNER, task_id, WORKER)
        assert maintenance.update_task_status(WORKER, task_id, TaskStatus.IN_PROGRESS).ok

    def test_stranger_rejected(self, maintenance, task_id):
        result = maintenance.update_task_status(OTHER, task_id, TaskStatus.CANCELLED)
        assert result.error == ErrorCode.NOT_AUTHORIZED
        assert maintenance.get_task(task_id).status == TaskStatus.SCHEDULED

    def test_unknown_task(self, maintenance):
        assert maintenance.update_task_status(OWNER, 9, TaskStatus.COMPLETED).error == ErrorCode.NOT_FOUND

    @pytest.mark.parametrize("status", [0, 5])
    def test_invalid_status(self, maintenance, task_id, status):
        assert maintenance.update_task_status(OWNER, task_id, status).error == ErrorCode.INVALID_STATUS

    def test_completion_stamps_height(self, maintenance, task_id):
        maintenance.update_task_status(OWNER, task_id, TaskStatus.COMPLETED)

        task = maintenance.get_task(task_id)
        assert task.status == TaskStatus.COMPLETED
        assert task.completion_date == MOCK_HEIGHT

    def test_reopening_keeps_completion_date(self, maintenance, task_id):
        maintenance.update_task_status(OWNER, task_id, TaskStatus.COMPLETED)
        maintenance.ledger.advance(10)

        assert maintenance.update_task_status(OWNER, task_id, TaskStatus.IN_PROGRESS).ok

        task = maintenance.get_task(task_id)
        assert task.status == TaskStatus.IN_PROGRESS
        assert task.completion_date == MOCK_HEIGHT

    def test_recompletion_restamps(self):
        svc = MaintenanceService(Ledger(height=50, advance_on_write=True))
        task_id = svc.create_task(OWNER, 1, "Inspect traffic lights", 2, 0).value  # block 51
        svc.update_task_status(OWNER, task_id, TaskStatus.COMPLETED)  # block 52
        svc.update_task_status(OWNER, task_id, TaskStatus.IN_PROGRESS)  # block 53
        svc.update_task_status(OWNER, task_id, TaskStatus.COMPLETED)  # block 54
        assert svc.get_task(task_id).completion_date == 54

    def test_other_transitions_leave_completion_date_unset(self, maintenance, task_id):
        maintenance.update_task_status(OWNER, task_id, TaskStatus.CANCELLED)
        assert maintenance.get_task(task_id).completion_date is None
