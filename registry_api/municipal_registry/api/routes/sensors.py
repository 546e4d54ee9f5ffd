from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Path

from municipal_registry.core.deps import found, get_broadcast_manager, get_caller, get_registry, unwrap
from municipal_registry.schemas.common import CreatedResponse
from municipal_registry.schemas.sensors import ReadingCreate, Sensor, SensorCreate, SensorReading
from municipal_registry.services.realtime import BroadcastManager
from municipal_registry.services.registry import RegistryState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sensors", tags=["Sensors"])


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=CreatedResponse,
    status_code=201,
    summary="Register sensor",
    description="Register a sensor owned by the caller on an asset id. The asset id is not checked.",
)
async def register_sensor(
    payload: SensorCreate,
    caller: str = Depends(get_caller),
    registry: RegistryState = Depends(get_registry),
) -> CreatedResponse:
    result = registry.sensors.register_sensor(
        caller,
        payload.name,
        payload.sensor_type,
        payload.asset_id,
        payload.location,
    )
    return CreatedResponse(id=unwrap(result))


# PUBLIC_INTERFACE
@router.get(
    "/readings/{reading_id}",
    response_model=SensorReading,
    summary="Get sensor reading",
)
async def get_sensor_reading(
    reading_id: int = Path(..., ge=0),
    registry: RegistryState = Depends(get_registry),
) -> SensorReading:
    return found(registry.sensors.get_sensor_reading(reading_id), "Reading")


# PUBLIC_INTERFACE
@router.get(
    "/{sensor_id}",
    response_model=Sensor,
    summary="Get sensor",
)
async def get_sensor(
    sensor_id: int = Path(..., ge=0),
    registry: RegistryState = Depends(get_registry),
) -> Sensor:
    return found(registry.sensors.get_sensor(sensor_id), "Sensor")


# PUBLIC_INTERFACE
@router.post(
    "/{sensor_id}/readings",
    response_model=CreatedResponse,
    status_code=201,
    summary="Record sensor reading",
    description=(
        "Append a reading for a sensor the caller owns. The reading is stamped with the "
        "ledger height and pushed to /ws/readings subscribers."
    ),
)
async def record_sensor_reading(
    payload: ReadingCreate,
    sensor_id: int = Path(..., ge=0),
    caller: str = Depends(get_caller),
    registry: RegistryState = Depends(get_registry),
    broadcast: BroadcastManager = Depends(get_broadcast_manager),
) -> CreatedResponse:
    reading_id = unwrap(registry.sensors.record_sensor_reading(caller, sensor_id, payload.value, payload.notes))

    # Live feed is best effort; the reading is already stored
    try:
        reading = registry.sensors.get_sensor_reading(reading_id)
        await broadcast.publish_reading(reading, caller=caller)
    except Exception:
        logger.exception("Failed to publish reading id=%d", reading_id)

    return CreatedResponse(id=reading_id)
