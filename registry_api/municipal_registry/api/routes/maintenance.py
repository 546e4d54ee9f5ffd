from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from municipal_registry.core.deps import found, get_caller, get_registry, unwrap
from municipal_registry.schemas.common import CreatedResponse, UpdatedResponse
from municipal_registry.schemas.maintenance import (
    MaintenanceTask,
    TaskAssign,
    TaskCreate,
    TaskStatusUpdate,
)
from municipal_registry.services.registry import RegistryState

router = APIRouter(prefix="/maintenance", tags=["Maintenance"])


# PUBLIC_INTERFACE
@router.post(
    "/tasks",
    response_model=CreatedResponse,
    status_code=201,
    summary="Create maintenance task",
    description="Schedule a task against an asset id. The asset id is not checked.",
)
async def create_task(
    payload: TaskCreate,
    caller: str = Depends(get_caller),
    registry: RegistryState = Depends(get_registry),
) -> CreatedResponse:
    result = registry.maintenance.create_task(
        caller,
        payload.asset_id,
        payload.description,
        payload.priority,
        payload.scheduled_date,
    )
    return CreatedResponse(id=unwrap(result))


# PUBLIC_INTERFACE
@router.get(
    "/tasks/{task_id}",
    response_model=MaintenanceTask,
    summary="Get maintenance task",
)
async def get_task(
    task_id: int = Path(..., ge=0),
    registry: RegistryState = Depends(get_registry),
) -> MaintenanceTask:
    return found(registry.maintenance.get_task(task_id), "Task")


# PUBLIC_INTERFACE
@router.post(
    "/tasks/{task_id}/assign",
    response_model=UpdatedResponse,
    summary="Assign maintenance task",
    description="Assign a scheduled, unassigned task to a worker. Only the task creator may assign.",
)
async def assign_task(
    payload: TaskAssign,
    task_id: int = Path(..., ge=0),
    caller: str = Depends(get_caller),
    registry: RegistryState = Depends(get_registry),
) -> UpdatedResponse:
    return UpdatedResponse(updated=unwrap(registry.maintenance.assign_task(caller, task_id, payload.worker)))


# PUBLIC_INTERFACE
@router.patch(
    "/tasks/{task_id}/status",
    response_model=UpdatedResponse,
    summary="Update maintenance task status",
    description=(
        "Set the task status. Allowed for the creator and the assigned worker. "
        "Completing a task stamps its completion date with the ledger height."
    ),
)
async def update_task_status(
    payload: TaskStatusUpdate,
    task_id: int = Path(..., ge=0),
    caller: str = Depends(get_caller),
    registry: RegistryState = Depends(get_registry),
) -> UpdatedResponse:
    return UpdatedResponse(updated=unwrap(registry.maintenance.update_task_status(caller, task_id, payload.status)))
