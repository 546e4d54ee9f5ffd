from __future__ import annotations

import logging
from typing import Optional

from municipal_registry.core.ledger import Ledger
from municipal_registry.core.settings import AppSettings
from municipal_registry.repositories.base import IdCounter
from municipal_registry.repositories.sensors import SensorReadingRepository, SensorRepository
from municipal_registry.schemas.common import LedgerInfo
from municipal_registry.services.assets import AssetService
from municipal_registry.services.maintenance import MaintenanceService
from municipal_registry.services.sensors import SensorService

logger = logging.getLogger(__name__)


class RegistryState:
    """
    The three registries and the ledger they share.

    Each registry owns its store and counter. Sensors and readings share one
    counter when `shared_sensor_counter` is true (the default); pass false to
    give readings their own id sequence.
    """

    def __init__(self, ledger: Optional[Ledger] = None, shared_sensor_counter: bool = True) -> None:
        self.ledger = ledger if ledger is not None else Ledger()
        self.assets = AssetService(self.ledger)
        self.maintenance = MaintenanceService(self.ledger)

        sensor_counter = IdCounter()
        reading_counter = sensor_counter if shared_sensor_counter else IdCounter()
        self.sensors = SensorService(
            self.ledger,
            sensors=SensorRepository(counter=sensor_counter),
            readings=SensorReadingRepository(counter=reading_counter),
        )

    # PUBLIC_INTERFACE
    @classmethod
    def from_settings(cls, settings: AppSettings) -> "RegistryState":
        """Build empty registries with a ledger configured from settings."""
        ledger = Ledger(
            height=settings.INITIAL_LEDGER_HEIGHT,
            advance_on_write=settings.LEDGER_ADVANCE_ON_WRITE,
        )
        logger.info(
            "Initialized registries at ledger height=%d (advance_on_write=%s)",
            ledger.height, settings.LEDGER_ADVANCE_ON_WRITE,
        )
        return cls(ledger=ledger)

    # PUBLIC_INTERFACE
    def summary(self) -> LedgerInfo:
        """Current ledger height and the last id issued by each counter."""
        return LedgerInfo(
            height=self.ledger.height,
            last_asset_id=self.assets.get_asset_count(),
            last_task_id=self.maintenance.get_task_count(),
            last_sensor_reading_id=self.sensors.readings.counter.current,
        )
