from __future__ import annotations

from typing import Optional

from municipal_registry.schemas.sensors import Sensor, SensorReading, SensorType
from .base import BaseRepository


class SensorRepository(BaseRepository[Sensor]):
    """Repository for sensors."""

    def create_sensor(
        self,
        *,
        name: str,
        sensor_type: SensorType,
        asset_id: int,
        location: str,
        owner: str,
    ) -> Sensor:
        sensor_id = self.next_id()
        sensor = Sensor(
            id=sensor_id,
            name=name,
            sensor_type=sensor_type,
            asset_id=asset_id,
            location=location,
            owner=owner,
        )
        return self.add(sensor_id, sensor)


class SensorReadingRepository(BaseRepository[SensorReading]):
    """Append-only repository for sensor readings."""

    def create_reading(
        self,
        *,
        sensor_id: int,
        timestamp: int,
        value: int,
        notes: Optional[str],
    ) -> SensorReading:
        reading_id = self.next_id()
        reading = SensorReading(
            id=reading_id,
            sensor_id=sensor_id,
            timestamp=timestamp,
            value=value,
            notes=notes,
        )
        return self.add(reading_id, reading)
