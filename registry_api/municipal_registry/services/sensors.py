from __future__ import annotations

import logging
from typing import Optional

from municipal_registry.core.ledger import Ledger
from municipal_registry.repositories.base import IdCounter
from municipal_registry.repositories.sensors import SensorReadingRepository, SensorRepository
from municipal_registry.schemas.common import ErrorCode, Result
from municipal_registry.schemas.sensors import Sensor, SensorReading, SensorType
from municipal_registry.services.base import BaseService, coerce_enum

logger = logging.getLogger(__name__)


class SensorService(BaseService):
    """
    Sensor and reading store.

    Sensors reference assets by id only. Readings are append-only and may be
    recorded only by the sensor's owner. Unless separate repositories are
    supplied, sensors and readings draw their ids from one shared counter, so
    a reading recorded right after a sensor registration gets the next id.
    """

    logger = logger

    def __init__(
        self,
        ledger: Ledger,
        sensors: Optional[SensorRepository] = None,
        readings: Optional[SensorReadingRepository] = None,
    ) -> None:
        super().__init__(ledger)
        if sensors is None or readings is None:
            shared = IdCounter()
            sensors = sensors if sensors is not None else SensorRepository(counter=shared)
            readings = readings if readings is not None else SensorReadingRepository(counter=shared)
        self.sensors = sensors
        self.readings = readings

    # PUBLIC_INTERFACE
    def register_sensor(
        self,
        caller: str,
        name: str,
        sensor_type: int,
        asset_id: int,
        location: str,
    ) -> Result[int]:
        """Register a sensor owned by the caller; returns the new sensor id."""
        with self.ledger.transaction() as write:
            kind = coerce_enum(SensorType, sensor_type)
            if kind is None:
                return self._reject("register_sensor", ErrorCode.INVALID_TYPE, sensor_type=sensor_type)
            sensor = self.sensors.create_sensor(
                name=name,
                sensor_type=kind,
                asset_id=asset_id,
                location=location,
                owner=caller,
            )
            write.accept()
        logger.info(
            "Registered sensor id=%d type=%s asset_id=%d owner=%s",
            sensor.id, kind.name, asset_id, caller,
        )
        return Result.success(sensor.id)

    # PUBLIC_INTERFACE
    def record_sensor_reading(
        self,
        caller: str,
        sensor_id: int,
        value: int,
        notes: Optional[str] = None,
    ) -> Result[int]:
        """
        Append a reading for a sensor the caller owns.

        The reading is timestamped with the current ledger height.
        """
        with self.ledger.transaction() as write:
            sensor = self.sensors.get(sensor_id)
            if sensor is None:
                return self._reject("record_sensor_reading", ErrorCode.NOT_FOUND, sensor_id=sensor_id)
            if sensor.owner != caller:
                return self._reject("record_sensor_reading", ErrorCode.NOT_AUTHORIZED, sensor_id=sensor_id)
            reading = self.readings.create_reading(
                sensor_id=sensor_id,
                timestamp=write.height,
                value=value,
                notes=notes,
            )
            write.accept()
        logger.info("Recorded reading id=%d sensor_id=%d at height=%d", reading.id, sensor_id, write.height)
        return Result.success(reading.id)

    # PUBLIC_INTERFACE
    def get_sensor(self, sensor_id: int) -> Optional[Sensor]:
        """Return the sensor, or None when the id is unknown."""
        return self.sensors.get(sensor_id)

    # PUBLIC_INTERFACE
    def get_sensor_reading(self, reading_id: int) -> Optional[SensorReading]:
        """Return the reading, or None when the id is unknown."""
        return self.readings.get(reading_id)
