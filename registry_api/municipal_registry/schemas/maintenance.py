from __future__ import annotations

from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TaskPriority(IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    EMERGENCY = 4


class TaskStatus(IntEnum):
    SCHEDULED = 1
    IN_PROGRESS = 2
    COMPLETED = 3
    CANCELLED = 4


class MaintenanceTask(BaseModel):
    """Maintenance task scheduled against an asset."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1, description="Task id")
    asset_id: int = Field(..., description="Referenced asset id (not checked)")
    description: str = Field(...)
    priority: TaskPriority = Field(...)
    scheduled_date: int = Field(..., description="Scheduled timestamp")
    completion_date: Optional[int] = Field(
        None, description="Ledger height at which the task was last marked completed"
    )
    status: TaskStatus = Field(TaskStatus.SCHEDULED)
    assigned_to: Optional[str] = Field(None, description="Assigned worker identity")
    created_by: str = Field(..., description="Identity that created the task")


class TaskCreate(BaseModel):
    """Create task payload."""
    asset_id: int = Field(..., ge=0, description="Asset id the task applies to")
    description: str = Field(...)
    priority: int = Field(..., description="TaskPriority value (1-4)")
    scheduled_date: int = Field(..., ge=0)


class TaskAssign(BaseModel):
    """Assign task payload."""
    worker: str = Field(..., min_length=1, description="Worker identity")


class TaskStatusUpdate(BaseModel):
    """Update task status payload."""
    status: int = Field(..., description="TaskStatus value (1-4)")
