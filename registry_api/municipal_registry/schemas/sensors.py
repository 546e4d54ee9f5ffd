from __future__ import annotations

from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SensorType(IntEnum):
    TEMPERATURE = 1
    HUMIDITY = 2
    TRAFFIC = 3
    AIR_QUALITY = 4
    STRUCTURAL = 5
    WATER_LEVEL = 6


class Sensor(BaseModel):
    """Sensor installed on an asset."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1, description="Sensor id")
    name: str = Field(...)
    sensor_type: SensorType = Field(...)
    asset_id: int = Field(..., description="Referenced asset id (not checked)")
    location: str = Field(...)
    owner: str = Field(..., description="Identity that registered the sensor")


class SensorReading(BaseModel):
    """Single value reported by a sensor."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1, description="Reading id")
    sensor_id: int = Field(...)
    timestamp: int = Field(..., description="Ledger height at which the reading was recorded")
    value: int = Field(...)
    notes: Optional[str] = Field(None)


class SensorCreate(BaseModel):
    """Register sensor payload."""
    name: str = Field(...)
    sensor_type: int = Field(..., description="SensorType value (1-6)")
    asset_id: int = Field(..., ge=0)
    location: str = Field(...)


class ReadingCreate(BaseModel):
    """Record reading payload."""
    value: int = Field(...)
    notes: Optional[str] = Field(None)
